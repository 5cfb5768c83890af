from typing import Annotated

from fastapi import Depends

from vigenere_breaker.core.config import Settings, get_settings
from vigenere_breaker.services.engine.manager import AttackManager, get_attack_manager


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Attack registry dependency
AttackManagerDep = Annotated[AttackManager, Depends(get_attack_manager)]
