"""Default configuration parameters for the ledger."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageParams:
    """Entity store parameters."""
    backend: str = "memory"            # memory | sqlite
    db_path: str = "ledger.db"         # SQLite file, used when backend=sqlite
    timeout_seconds: float = 30.0      # SQLite busy timeout


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False


@dataclass(frozen=True)
class AccountingParams:
    """Accounting core parameters."""
    # Max |available + held - 1| accepted as float drift
    conservation_tolerance: float = 1e-9


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    storage: StorageParams
    logging: LoggingParams
    accounting: AccountingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        storage=StorageParams(),
        logging=LoggingParams(),
        accounting=AccountingParams(),
    )
