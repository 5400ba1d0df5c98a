"""Runtime configuration: per-role connection strings and the log file.

Credentials come from the environment (or CLI flags), never from source:

    SHOPDB_ADMIN_DSN, SHOPDB_MANAGER_DSN, SHOPDB_CUSTOMER_DSN
    SHOPDB_DSN        fallback for any role without its own variable
    SHOPDB_LOG_FILE   defaults to logs.txt
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

DEFAULT_LOG_FILE = "logs.txt"
FALLBACK_DSN_VAR = "SHOPDB_DSN"
LOG_FILE_VAR = "SHOPDB_LOG_FILE"


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def dsn_var(self) -> str:
        return f"SHOPDB_{self.name}_DSN"


@dataclass(frozen=True)
class ShopConfig:
    role_dsns: dict[Role, str]
    log_file: str = DEFAULT_LOG_FILE

    def dsn_for(self, role: Role) -> str:
        return self.role_dsns[role]

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        db_url: str | None = None,
        log_file: str | None = None,
    ) -> "ShopConfig":
        """Build the config from environment variables.

        ``db_url`` (the --db-url flag) overrides every role's connection string.

        Raises:
            ValueError: if some role has no connection string.
        """
        env = os.environ if environ is None else environ
        fallback = db_url or env.get(FALLBACK_DSN_VAR, "")

        role_dsns: dict[Role, str] = {}
        missing = []
        for role in Role:
            dsn = db_url or env.get(role.dsn_var, "") or fallback
            if dsn:
                role_dsns[role] = dsn
            else:
                missing.append(role.dsn_var)
        if missing:
            raise ValueError(
                f"No connection string for {', '.join(missing)}; set them or {FALLBACK_DSN_VAR}"
            )

        return cls(
            role_dsns=role_dsns,
            log_file=log_file or env.get(LOG_FILE_VAR, DEFAULT_LOG_FILE),
        )
