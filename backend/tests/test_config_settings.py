"""Settings - environment parsing for database, signer and allow-list."""

import json

from fname_registry.config import Settings


def test_postgres_url_rewritten_for_asyncpg(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/db")
    assert Settings().database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_admin_keys_parsed_from_json(monkeypatch):
    address = "0x" + "12" * 20
    monkeypatch.setenv("ADMIN_KEYS", json.dumps({"5": address}))
    assert Settings().admin_keys == {5: address}


def test_service_name_read_from_dd_service(monkeypatch):
    monkeypatch.setenv("DD_SERVICE", "fnames-staging")
    assert Settings().service_name == "fnames-staging"


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("DD_SERVICE", raising=False)
    settings = Settings(_env_file=None)
    assert settings.environment == "dev"
    assert settings.service_name == "fname-registry"
    assert settings.eip712_chain_id == 1
