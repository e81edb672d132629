import pytest

from jsonplan import (
    ColumnField,
    ContextResolvedTable,
    FunctionCatalog,
    FunctionDefinition,
    InMemoryCatalog,
    IntegerType,
    ObjectIdentifier,
    ResolvedTable,
    Schema,
    StringType,
    configure_logging,
)
from jsonplan.testing import catalog_serde_context, default_serde_context

configure_logging()


@pytest.fixture
def serde_context():
    return default_serde_context()


@pytest.fixture
def orders_identifier():
    return ObjectIdentifier.of("orders")


@pytest.fixture
def orders_table():
    return ResolvedTable(
        schema=Schema(
            column_fields=[
                ColumnField(name="order_id", data_type=IntegerType),
                ColumnField(name="customer", data_type=StringType),
            ]
        ),
        options={"connector": "filesystem", "path": "/data/orders"},
        comment="All orders",
    )


@pytest.fixture
def resolved_orders(orders_identifier, orders_table):
    return ContextResolvedTable.permanent(orders_identifier, orders_table)


@pytest.fixture
def catalog(orders_identifier, orders_table):
    return InMemoryCatalog({orders_identifier: orders_table})


@pytest.fixture
def function_catalog():
    functions = FunctionCatalog()
    functions.register_temporary_system_function(
        "mask", FunctionDefinition(name="mask", return_type=StringType, input_types=(StringType,))
    )
    functions.register_catalog_function(
        ObjectIdentifier.of("discount"),
        FunctionDefinition(name="discount", return_type=IntegerType, input_types=(IntegerType,)),
    )
    return functions


@pytest.fixture
def catalog_context(catalog, function_catalog):
    return catalog_serde_context(catalog, function_catalog=function_catalog)
