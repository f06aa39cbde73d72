from .base import Effect, EffectContext, EffectInvocation
from .custom import CustomEffect, EffectCommand, SetSpeedCommand
from .damage import DamageEffect
from .modifier import AttributeModifierEffect
from .position import PositionChangeEffect
from .restoration import ResourceRestorationEffect
from .status import ApplyStatusEffect

__all__ = [
    "ApplyStatusEffect",
    "AttributeModifierEffect",
    "CustomEffect",
    "DamageEffect",
    "Effect",
    "EffectCommand",
    "EffectContext",
    "EffectInvocation",
    "PositionChangeEffect",
    "ResourceRestorationEffect",
    "SetSpeedCommand",
]
