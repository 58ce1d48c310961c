"""Database dialects and the AST families they share."""

from __future__ import annotations

import enum


class Family(enum.Enum):
    """Shape of the statement tree a dialect's parser produces."""

    MYSQL = "mysql"
    POSTGRES = "postgres"


class Dialect(enum.Enum):
    """Database engine a review runs against."""

    MYSQL = "MYSQL"
    TIDB = "TIDB"
    MARIADB = "MARIADB"
    OCEANBASE = "OCEANBASE"
    POSTGRES = "POSTGRES"

    @property
    def family(self) -> Family:
        if self is Dialect.POSTGRES:
            return Family.POSTGRES
        return Family.MYSQL


MYSQL_FAMILY = (Dialect.MYSQL, Dialect.TIDB, Dialect.MARIADB, Dialect.OCEANBASE)
