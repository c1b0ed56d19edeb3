from ebike_sim.services.translation_service import (
    Language,
    Translator,
    StaticTranslator,
    RedisTranslator,
    localize,
    get_translator,
)

__all__ = [
    "Language",
    "Translator",
    "StaticTranslator",
    "RedisTranslator",
    "localize",
    "get_translator",
]
