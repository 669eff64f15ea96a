"""
Tests for the translation gateway.

HTTP is never touched: ``requests.get`` is monkeypatched with fakes that
record the request and return canned payloads.
"""

import hashlib

import pytest
import requests

from mjtoolbox.keys import KeyManager
from mjtoolbox.translate import (
    EchoTranslator,
    ErrorKind,
    TranslationContext,
    TranslationError,
    available_backends,
    create_translator,
    user_message,
)
from mjtoolbox.translate.baidu import BaiduTranslator
from mjtoolbox.translate.base import INSUFFICIENT_BALANCE_MESSAGE
from mjtoolbox.translate.google import GoogleFreeTranslator


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


@pytest.fixture
def fake_get(monkeypatch):
    """Install a fake requests.get; returns the list of recorded calls."""
    calls = []

    def install(response=None, exc=None):
        def fake(url, params=None, timeout=None):
            calls.append({"url": url, "params": params, "timeout": timeout})
            if exc is not None:
                raise exc
            return response
        monkeypatch.setattr(requests, "get", fake)
        return calls

    return install


class TestEchoTranslator:
    def test_cjk_mode(self):
        result = EchoTranslator().translate("A cat. A dog!")
        assert result.text == "A cat。 A dog！"
        assert result.source_text == "A cat. A dog!"

    def test_echo_and_prefix(self):
        assert EchoTranslator("echo").translate("hi").text == "hi"
        assert EchoTranslator("prefix").translate("hi").text == "[TRANSLATED] hi"

    def test_bad_mode(self):
        with pytest.raises(ValueError):
            EchoTranslator("shout")


class TestFactory:
    def test_known_backends(self):
        assert isinstance(create_translator("echo"), EchoTranslator)
        assert isinstance(create_translator("GOOGLE"), GoogleFreeTranslator)
        assert isinstance(create_translator("baidu", app_id="a", secret_key="b"), BaiduTranslator)

    def test_registry_order(self):
        assert available_backends()[0] == "google"
        assert set(available_backends()) == {"google", "baidu", "echo"}

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Available backends"):
            create_translator("babelfish")


class TestGoogleFreeTranslator:
    def test_joins_chunks(self, fake_get):
        payload = [[["一只猫。", "A cat.", None], ["一只狗！", "A dog!", None]], None, "en"]
        calls = fake_get(FakeResponse(payload))

        result = GoogleFreeTranslator(timeout=3).translate("A cat. A dog!")

        assert result.text == "一只猫。一只狗！"
        params = calls[0]["params"]
        assert params["client"] == "gtx"
        assert params["tl"] == "zh-CN"
        assert params["sl"] == "auto"
        assert params["q"] == "A cat. A dog!"
        assert calls[0]["timeout"] == 3

    def test_context_languages(self, fake_get):
        calls = fake_get(FakeResponse([[["Un chat.", "A cat.", None]]]))
        GoogleFreeTranslator().translate("A cat.", TranslationContext(source_lang="en", target_lang="fr"))
        assert (calls[0]["params"]["sl"], calls[0]["params"]["tl"]) == ("en", "fr")

    def test_network_error(self, fake_get):
        fake_get(exc=requests.exceptions.ConnectionError("connection refused"))
        with pytest.raises(TranslationError) as exc:
            GoogleFreeTranslator().translate("A cat.")
        assert exc.value.kind is ErrorKind.NETWORK
        assert exc.value.provider == "Google Translate"

    def test_http_error(self, fake_get):
        fake_get(FakeResponse(status_code=429))
        with pytest.raises(TranslationError) as exc:
            GoogleFreeTranslator().translate("A cat.")
        assert exc.value.kind is ErrorKind.NETWORK

    @pytest.mark.parametrize("response", [
        FakeResponse(bad_json=True),
        FakeResponse({"unexpected": True}),
        FakeResponse(None),
    ])
    def test_malformed(self, fake_get, response):
        fake_get(response)
        with pytest.raises(TranslationError) as exc:
            GoogleFreeTranslator().translate("A cat.")
        assert exc.value.kind is ErrorKind.MALFORMED_RESPONSE


class TestBaiduTranslator:
    def test_signed_request(self, fake_get):
        calls = fake_get(FakeResponse({
            "from": "en", "to": "zh",
            "trans_result": [{"src": "A cat.", "dst": "一只猫。"}],
        }))

        result = BaiduTranslator(app_id="appid", secret_key="secret").translate("A cat.")

        assert result.text == "一只猫。"
        params = calls[0]["params"]
        expected = hashlib.md5(("appid" + "A cat." + params["salt"] + "secret").encode()).hexdigest()
        assert params["sign"] == expected
        assert params["appid"] == "appid"
        assert (params["from"], params["to"]) == ("auto", "zh")

    def test_multiline_result(self, fake_get):
        fake_get(FakeResponse({"trans_result": [{"dst": "一只猫。"}, {"dst": "一只狗！"}]}))
        result = BaiduTranslator(app_id="a", secret_key="b").translate("A cat.\nA dog!")
        assert result.text == "一只猫。\n一只狗！"

    def test_insufficient_balance(self, fake_get):
        fake_get(FakeResponse({"error_code": "54004", "error_msg": "Please recharge"}))
        with pytest.raises(TranslationError) as exc:
            BaiduTranslator(app_id="a", secret_key="b").translate("A cat.")
        assert exc.value.kind is ErrorKind.INSUFFICIENT_BALANCE
        assert exc.value.code == "54004"
        assert user_message(exc.value) == INSUFFICIENT_BALANCE_MESSAGE

    def test_other_error_passes_message(self, fake_get):
        fake_get(FakeResponse({"error_code": 52003, "error_msg": "UNAUTHORIZED USER"}))
        with pytest.raises(TranslationError) as exc:
            BaiduTranslator(app_id="a", secret_key="b").translate("A cat.")
        assert exc.value.kind is ErrorKind.OTHER
        assert user_message(exc.value) == "Translation failed: 52003: UNAUTHORIZED USER"

    def test_missing_result(self, fake_get):
        fake_get(FakeResponse({"from": "en"}))
        with pytest.raises(TranslationError) as exc:
            BaiduTranslator(app_id="a", secret_key="b").translate("A cat.")
        assert exc.value.kind is ErrorKind.MALFORMED_RESPONSE

    def test_missing_credentials(self, tmp_path, monkeypatch, fake_get):
        monkeypatch.delenv("BAIDU_APP_ID", raising=False)
        monkeypatch.delenv("BAIDU_SECRET_KEY", raising=False)
        calls = fake_get(FakeResponse({}))
        manager = KeyManager(config_file=tmp_path / "keys.json", use_keyring=False)

        with pytest.raises(TranslationError, match="credentials not configured"):
            BaiduTranslator(key_manager=manager).translate("A cat.")
        assert calls == []

    def test_credentials_from_key_manager(self, tmp_path, monkeypatch, fake_get):
        monkeypatch.setenv("BAIDU_APP_ID", "env-app")
        monkeypatch.setenv("BAIDU_SECRET_KEY", "env-secret")
        calls = fake_get(FakeResponse({"trans_result": [{"dst": "猫。"}]}))
        manager = KeyManager(config_file=tmp_path / "keys.json", use_keyring=False)

        BaiduTranslator(key_manager=manager).translate("Cat.")
        assert calls[0]["params"]["appid"] == "env-app"


class TestUserMessage:
    def test_raw_message_passthrough(self):
        error = TranslationError("boom", kind=ErrorKind.NETWORK)
        assert user_message(error) == "Translation failed: boom"
