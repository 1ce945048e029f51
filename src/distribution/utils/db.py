from protean.domain import Domain
from sqlalchemy import create_engine

_RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    """Touch each repository's DAO so its SQLAlchemy model is registered on the provider metadata."""
    registries = (
        domain.registry.aggregates,
        domain.registry.entities,
        domain.registry.projections,
    )
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every relational provider; memory providers need nothing."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider.name)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
