"""Advisors for the MySQL family (MySQL, TiDB, MariaDB, OceanBase)."""
