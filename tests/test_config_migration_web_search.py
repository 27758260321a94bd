import copy
import json

from nanosearch.config.loader import (
    _apply_env_api_keys,
    _migrate_config,
    convert_keys,
    convert_to_camel,
    load_config,
    save_config,
)
from nanosearch.config.schema import Config


def test_migrate_legacy_search_api_key_to_perplexity_provider() -> None:
    raw = {"search": {"apiKey": "legacy-pplx-key"}}

    migrated = _migrate_config(copy.deepcopy(raw))

    assert migrated["search"]["providers"]["perplexity"]["apiKey"] == "legacy-pplx-key"
    assert "apiKey" not in migrated["search"]


def test_migrate_does_not_override_new_provider_key() -> None:
    raw = {
        "search": {
            "apiKey": "legacy-pplx-key",
            "providers": {"perplexity": {"apiKey": "new-pplx-key"}},
        }
    }

    migrated = _migrate_config(copy.deepcopy(raw))

    assert migrated["search"]["providers"]["perplexity"]["apiKey"] == "new-pplx-key"


def test_migrate_fills_default_provider_base_urls() -> None:
    raw = {"search": {"providers": {"duckduckgo": {"baseUrl": ""}}}}

    providers = _migrate_config(copy.deepcopy(raw))["search"]["providers"]

    assert providers["perplexity"]["baseUrl"] == "https://api.perplexity.ai"
    assert providers["duckduckgo"]["baseUrl"] == "https://html.duckduckgo.com"


def test_config_defaults() -> None:
    search = Config().search

    assert search.providers.perplexity.api_key == ""
    assert search.providers.perplexity.max_tokens == 2000
    assert search.fetch.timeout == 10.0
    assert search.fetch.max_page_chars == 10000
    assert search.fetch.max_content_chars == 5000
    assert search.max_limit == 20


def test_config_roundtrip_with_camel_case() -> None:
    config = Config()
    config.search.providers.duckduckgo.accept_language = "de-DE,de;q=0.8"
    data = convert_to_camel(config.model_dump())

    assert "acceptLanguage" in data["search"]["providers"]["duckduckgo"]
    reloaded = Config.model_validate(convert_keys(data))
    assert reloaded.search.providers.duckduckgo.accept_language == "de-DE,de;q=0.8"


def test_load_config_reads_file_and_env_key(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"search": {"maxLimit": 5, "fetch": {"maxContentChars": 100}}}))
    monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx-from-env")

    config = load_config(path)

    assert config.search.max_limit == 5
    assert config.search.fetch.max_content_chars == 100
    assert config.search.providers.perplexity.api_key == "pplx-from-env"


def test_env_key_does_not_override_file_key() -> None:
    config = Config()
    config.search.providers.perplexity.api_key = "pplx-from-file"

    _apply_env_api_keys(config, {"PERPLEXITY_API_KEY": "pplx-from-env"})

    assert config.search.providers.perplexity.api_key == "pplx-from-file"


def test_load_config_invalid_json_uses_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{not json")

    config = load_config(path)

    assert config == Config()


def test_save_config_writes_camel_case(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.search.providers.perplexity.api_key = "pplx-saved"

    save_config(config, path)

    data = json.loads(path.read_text())
    assert data["search"]["providers"]["perplexity"]["apiKey"] == "pplx-saved"
    assert load_config(path).search.providers.perplexity.api_key == "pplx-saved"


def test_migrate_treats_null_sections_as_empty() -> None:
    migrated = _migrate_config({"search": None})
    assert migrated["search"]["providers"]["duckduckgo"]["baseUrl"] == "https://html.duckduckgo.com"

    migrated = _migrate_config({"search": {"providers": None, "apiKey": "legacy-pplx-key"}})
    assert migrated["search"]["providers"]["perplexity"]["apiKey"] == "legacy-pplx-key"


def test_load_config_malformed_shapes_use_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    path = tmp_path / "config.json"

    for raw in ("[1, 2, 3]", '"just a string"', '{"search": 5}', '{"search": {"providers": []}}'):
        path.write_text(raw)
        assert load_config(path) == Config()


def test_load_config_null_search_section(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    path = tmp_path / "config.json"
    path.write_text('{"search": null}')

    assert load_config(path) == Config()
