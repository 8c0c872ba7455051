import pytest

from dialectkit.drivers import MalformedMetadataError, MySQLDriver, QueryExecutionError
from dialectkit.schema import ColumnInfo, ForeignKeyInfo, IndexInfo, TableInfo


class ScriptedConnection:
    """Answers each statement with the rows registered for its prefix."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.executed = []
        self.quoted = []

    def execute(self, sql):
        self.executed.append(sql)
        for prefix, rows in self.responses.items():
            if sql.startswith(prefix):
                if isinstance(rows, Exception):
                    raise rows
                return [dict(row) for row in rows]
        return []

    def quote_literal(self, value):
        self.quoted.append(value)
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _driver(responses):
    connection = ScriptedConnection(responses)
    return MySQLDriver(connection, {"charset": ""}), connection


def _column_row(field, type_, *, null="NO", key="", default=None, extra=""):
    return {
        "Field": field,
        "Type": type_,
        "Collation": None,
        "Null": null,
        "Key": key,
        "Default": default,
        "Extra": extra,
        "Privileges": "select,insert,update,references",
        "Comment": "",
    }


def _index_row(key_name, seq, column, *, non_unique=0):
    return {
        "Table": "orders",
        "Non_unique": non_unique,
        "Key_name": key_name,
        "Seq_in_index": seq,
        "Column_name": column,
        "Collation": "A",
        "Index_type": "BTREE",
    }


def test_get_tables_classifies_views():
    driver, connection = _driver(
        {
            "SHOW FULL TABLES": [
                {"Tables_in_shop": "orders", "Table_type": "BASE TABLE"},
                {"Tables_in_shop": "order_totals", "Table_type": "VIEW"},
            ]
        }
    )
    assert driver.get_tables() == [
        TableInfo(name="orders", is_view=False),
        TableInfo(name="order_totals", is_view=True),
    ]
    assert connection.executed == ["SHOW FULL TABLES"]


def test_get_tables_without_type_column():
    driver, _ = _driver({"SHOW FULL TABLES": [{"Tables_in_shop": "orders"}]})
    assert driver.get_tables() == [TableInfo(name="orders", is_view=False)]


def test_get_tables_empty_result():
    driver, _ = _driver({})
    assert driver.get_tables() == []


def test_get_columns_parses_type():
    driver, connection = _driver(
        {
            "SHOW FULL COLUMNS": [
                _column_row("id", "int(10) unsigned", key="PRI", extra="auto_increment"),
                _column_row("email", "varchar(255)"),
                _column_row("note", "text", null="YES"),
                _column_row("price", "decimal(10,2)", default="0.00"),
                _column_row("status", "enum('new','paid')", default="new"),
            ]
        }
    )
    columns = driver.get_columns("orders")
    assert connection.executed == ["SHOW FULL COLUMNS FROM `orders`"]

    id_col, email, note, price, status = columns
    assert id_col == ColumnInfo(
        name="id",
        table="orders",
        native_type="INT",
        size=10,
        unsigned=True,
        nullable=False,
        default=None,
        auto_increment=True,
        primary=True,
    )
    assert (email.native_type, email.size, email.nullable) == ("VARCHAR", 255, False)
    assert email.unsigned is False
    assert (note.native_type, note.size, note.nullable) == ("TEXT", None, True)
    assert (price.native_type, price.size, price.default) == ("DECIMAL", 10, "0.00")
    assert (status.native_type, status.size) == ("ENUM", None)
    assert email.vendor["Privileges"] == "select,insert,update,references"


def test_get_columns_delimits_table_name():
    driver, connection = _driver({})
    assert driver.get_columns("we`ird") == []
    assert connection.executed == ["SHOW FULL COLUMNS FROM `we``ird`"]


def test_get_columns_missing_field_fails_loudly():
    row = _column_row("id", "int(11)")
    del row["Null"]
    driver, _ = _driver({"SHOW FULL COLUMNS": [row]})
    with pytest.raises(MalformedMetadataError, match="Null"):
        driver.get_columns("orders")


def test_get_indexes_groups_rows_by_name():
    driver, connection = _driver(
        {
            "SHOW INDEX": [
                _index_row("PRIMARY", 1, "id"),
                _index_row("uniq_customer_number", 2, "number"),
                _index_row("uniq_customer_number", 1, "customer_id"),
                _index_row("idx_created", 1, "created_at", non_unique=1),
            ]
        }
    )
    indexes = driver.get_indexes("orders")
    assert connection.executed == ["SHOW INDEX FROM `orders`"]
    assert indexes == [
        IndexInfo(name="PRIMARY", unique=True, primary=True, columns=("id",)),
        IndexInfo(
            name="uniq_customer_number",
            unique=True,
            primary=False,
            columns=("customer_id", "number"),
        ),
        IndexInfo(name="idx_created", unique=False, primary=False, columns=("created_at",)),
    ]


def test_get_indexes_accepts_string_flags():
    driver, _ = _driver({"SHOW INDEX": [_index_row("idx_a", "1", "a", non_unique="1")]})
    assert driver.get_indexes("orders") == [
        IndexInfo(name="idx_a", unique=False, primary=False, columns=("a",))
    ]


def test_get_indexes_functional_key_part_uses_expression():
    row = _index_row("idx_lower_email", 1, None)
    row["Expression"] = "lower(`email`)"
    driver, _ = _driver({"SHOW INDEX": [row]})
    assert driver.get_indexes("orders")[0].columns == ("lower(`email`)",)


def test_get_indexes_rejects_gaps():
    driver, _ = _driver(
        {"SHOW INDEX": [_index_row("idx_ab", 1, "a"), _index_row("idx_ab", 3, "b")]}
    )
    with pytest.raises(MalformedMetadataError, match="idx_ab"):
        driver.get_indexes("orders")


def test_get_indexes_rejects_repeated_positions():
    driver, _ = _driver(
        {
            "SHOW INDEX": [
                _index_row("idx_abc", 1, "a"),
                _index_row("idx_abc", 2, "b"),
                _index_row("idx_abc", 2, "c"),
            ]
        }
    )
    with pytest.raises(MalformedMetadataError, match="position 2 twice"):
        driver.get_indexes("orders")


def test_get_foreign_keys_quotes_table_literal():
    driver, connection = _driver(
        {
            "SELECT CONSTRAINT_NAME": [
                {
                    "CONSTRAINT_NAME": "fk_order_customer",
                    "COLUMN_NAME": "customer_id",
                    "REFERENCED_TABLE_NAME": "customers",
                    "REFERENCED_COLUMN_NAME": "id",
                },
                {
                    "CONSTRAINT_NAME": "fk_order_item",
                    "COLUMN_NAME": "item_sku",
                    "REFERENCED_TABLE_NAME": "items",
                    "REFERENCED_COLUMN_NAME": "sku",
                },
                {
                    "CONSTRAINT_NAME": "fk_order_item",
                    "COLUMN_NAME": "item_rev",
                    "REFERENCED_TABLE_NAME": "items",
                    "REFERENCED_COLUMN_NAME": "rev",
                },
            ]
        }
    )
    keys = driver.get_foreign_keys("o'rders")
    assert connection.quoted == ["o'rders"]
    sql = connection.executed[-1]
    assert "TABLE_SCHEMA = DATABASE()" in sql
    assert "REFERENCED_TABLE_NAME IS NOT NULL" in sql
    assert sql.endswith("TABLE_NAME = 'o\\'rders'")
    assert keys == [
        ForeignKeyInfo(name="fk_order_customer", local="customer_id", table="customers", foreign="id"),
        ForeignKeyInfo(name="fk_order_item", local="item_sku", table="items", foreign="sku"),
        ForeignKeyInfo(name="fk_order_item", local="item_rev", table="items", foreign="rev"),
    ]


def test_reflection_errors_propagate_unchanged():
    failure = QueryExecutionError("Table 'shop.nope' doesn't exist", code=1146)
    driver, _ = _driver({"SHOW FULL COLUMNS": failure})
    with pytest.raises(QueryExecutionError) as excinfo:
        driver.get_columns("nope")
    assert excinfo.value is failure


def test_reflection_does_not_cache():
    driver, connection = _driver({"SHOW FULL TABLES": [{"Tables_in_shop": "orders"}]})
    driver.get_tables()
    driver.get_tables()
    assert connection.executed == ["SHOW FULL TABLES", "SHOW FULL TABLES"]
