"""
Ledger assembly.

Loads configuration, configures logging and wires the entity store, the
accounting core and the text gateway into one `Ledger` handle.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .accounting import AccountingCore, LedgerGateway
from .config.defaults import AccountingParams
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .errors import ConfigurationError
from .logging.config import configure_logging
from .persistence import InMemoryLedgerStore, LedgerStore, SqliteLedgerStore

logger = structlog.get_logger(__name__)


@dataclass
class Ledger:
    """Assembled ledger components."""
    config: dict[str, Any]
    store: LedgerStore
    core: AccountingCore
    gateway: LedgerGateway

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def create_store(storage: dict[str, Any]) -> LedgerStore:
    """Instantiate the backend named by the storage config section."""
    backend = storage.get("backend", "memory")

    if backend == "memory":
        return InMemoryLedgerStore()
    if backend == "sqlite":
        return SqliteLedgerStore(
            db_path=storage.get("db_path", "ledger.db"),
            timeout_seconds=storage.get("timeout_seconds", 30.0),
        )

    raise ConfigurationError(f"Unknown storage backend: {backend}")


def build_ledger(
    config_dir: Optional[Union[str, Path]] = None,
    overrides: Optional[dict[str, Any]] = None,
    setup_logging: bool = True
) -> Ledger:
    """
    Build a ready-to-use ledger.

    Args:
        config_dir: Directory holding ledger.yaml; defaults to the project config dir
        overrides: Highest-precedence configuration values
        setup_logging: Configure structlog from the logging section

    Returns:
        Ledger with store, core and gateway wired together

    Raises:
        ConfigurationError: If the merged configuration fails validation
    """
    config = ConfigLoader.create(config_dir).merge_config(overrides)

    errors = ConfigValidator.validate_config(config)
    if errors:
        error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
        logger.error("Ledger configuration invalid", errors=error_msgs)
        raise ConfigurationError("Invalid ledger configuration", errors=error_msgs)

    if setup_logging:
        logging_config = config["logging"]
        configure_logging(
            level=logging_config["level"],
            format_json=logging_config["format_json"],
            include_timestamp=logging_config["include_timestamp"],
            include_caller=logging_config["include_caller"],
        )

    store = create_store(config["storage"])
    core = AccountingCore(store, params=AccountingParams(
        conservation_tolerance=config["accounting"]["conservation_tolerance"]
    ))
    gateway = LedgerGateway(core)

    logger.info(
        "Ledger initialized",
        backend=config["storage"]["backend"],
        conservation_tolerance=config["accounting"]["conservation_tolerance"]
    )

    return Ledger(config=config, store=store, core=core, gateway=gateway)
