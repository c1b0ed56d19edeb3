from unittest.mock import MagicMock, patch
from ebike_sim.services import translation_service
from ebike_sim.services.translation_service import Language, RedisTranslator, StaticTranslator, localize
import redis
import pytest

class TestTranslationService:

    def test_static_table(self):
        translator = StaticTranslator()
        assert translator.translate("optimal", Language.SECONDARY) == "Optimal"
        assert translator.translate("optimal", Language.PRIMARY) == "Оптимально"
        assert translator.translate("missing", Language.PRIMARY) is None

    def test_localize_falls_back_to_key(self):
        assert localize(None, "warm") == "warm"
        assert localize(StaticTranslator({}), "warm") == "warm"
        assert localize(StaticTranslator(), "warm", Language.SECONDARY) == "Warm"

    def test_localize_survives_broken_translator(self):
        broken = MagicMock()
        broken.translate.side_effect = RuntimeError("boom")
        assert localize(broken, "hot") == "hot"

    def test_redis_lookup(self):
        client = MagicMock()
        client.hget.return_value = "Норма"
        translator = RedisTranslator(client, prefix="translations")

        assert translator.translate("standard", Language.PRIMARY) == "Норма"
        client.hget.assert_called_once_with("translations:ru", "standard")

    def test_redis_failure_is_a_miss(self):
        client = MagicMock()
        client.hget.side_effect = redis.ConnectionError("down")
        translator = RedisTranslator(client)

        assert translator.translate("standard", Language.SECONDARY) is None
        assert localize(translator, "standard", Language.SECONDARY) == "standard"

    def test_seed_writes_both_languages(self):
        client = MagicMock()
        client.hset.return_value = 10
        written = RedisTranslator(client, prefix="t").seed()

        assert written == 20
        keys = [call.args[0] for call in client.hset.call_args_list]
        assert keys == ["t:ru", "t:en"]

    @patch("ebike_sim.services.translation_service.get_redis_client")
    def test_get_translator_without_redis(self, mock_client):
        mock_client.return_value = None
        assert isinstance(translation_service.get_translator(), StaticTranslator)

    @patch("ebike_sim.services.translation_service.get_redis_client")
    def test_get_translator_with_redis(self, mock_client):
        mock_client.return_value = MagicMock()
        assert isinstance(translation_service.get_translator(), RedisTranslator)
