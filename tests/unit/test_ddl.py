"""
Unit tests for SQL statement rendering.
"""

from snowkit.client import ddl
from snowkit.models import CreateMode, ResourceKind, ResourceSpec
from tests.fixtures import TEST_SCHEMA, TEST_STAGE, make_spec


class TestRenderCreate:
    """Tests for CREATE statements."""

    def test_create_or_replace_warehouse(self) -> None:
        spec = make_spec(
            ResourceKind.WAREHOUSE,
            "MONAI_WH",
            configuration={"WAREHOUSE_SIZE": "SMALL", "AUTO_SUSPEND": 60, "AUTO_RESUME": True},
            comment="Compute for MONAI notebooks",
        )

        assert ddl.render_create(spec, CreateMode.OR_REPLACE) == (
            "CREATE OR REPLACE WAREHOUSE MONAI_WH WAREHOUSE_SIZE = 'SMALL' AUTO_SUSPEND = 60 "
            "AUTO_RESUME = TRUE COMMENT = 'Compute for MONAI notebooks'"
        )

    def test_create_if_not_exists_stage_with_nested_options(self) -> None:
        spec = make_spec(
            ResourceKind.STAGE,
            TEST_STAGE,
            configuration={"ENCRYPTION": {"TYPE": "SNOWFLAKE_SSE"}, "DIRECTORY": {"ENABLE": True}},
        )

        assert ddl.render_create(spec, CreateMode.IF_NOT_EXISTS) == (
            f"CREATE STAGE IF NOT EXISTS {TEST_STAGE} "
            "ENCRYPTION = (TYPE = 'SNOWFLAKE_SSE') DIRECTORY = (ENABLE = TRUE)"
        )

    def test_network_rule_keywords_and_values(self) -> None:
        spec = make_spec(
            ResourceKind.NETWORK_RULE,
            f"{TEST_SCHEMA}.ALLOW_ALL_RULE",
            configuration={"MODE": "EGRESS", "TYPE": "HOST_PORT", "VALUE_LIST": ["0.0.0.0:443", "0.0.0.0:80"]},
        )

        assert ddl.render_create(spec, CreateMode.OR_REPLACE) == (
            f"CREATE OR REPLACE NETWORK RULE {TEST_SCHEMA}.ALLOW_ALL_RULE MODE = EGRESS TYPE = HOST_PORT "
            "VALUE_LIST = ('0.0.0.0:443', '0.0.0.0:80')"
        )

    def test_integration_rules_are_identifiers(self) -> None:
        spec = make_spec(
            ResourceKind.EXTERNAL_ACCESS_INTEGRATION,
            "ALLOW_ALL_EAI",
            configuration={"ALLOWED_NETWORK_RULES": [f"{TEST_SCHEMA}.ALLOW_ALL_RULE"], "ENABLED": True},
        )

        assert ddl.render_create(spec, CreateMode.OR_REPLACE) == (
            "CREATE OR REPLACE EXTERNAL ACCESS INTEGRATION ALLOW_ALL_EAI "
            f"ALLOWED_NETWORK_RULES = ({TEST_SCHEMA}.ALLOW_ALL_RULE) ENABLED = TRUE"
        )

    def test_notebook_from_clause(self) -> None:
        spec = make_spec(ResourceKind.NOTEBOOK, f"{TEST_SCHEMA}.NB")
        options = {"FROM": f"@{TEST_STAGE}", "MAIN_FILE": "nb.ipynb", "QUERY_WAREHOUSE": None}

        assert ddl.render_create(spec, CreateMode.OR_REPLACE, options) == (
            f"CREATE OR REPLACE NOTEBOOK {TEST_SCHEMA}.NB FROM '@{TEST_STAGE}' MAIN_FILE = 'nb.ipynb'"
        )

    def test_literals_are_escaped(self) -> None:
        spec = ResourceSpec(kind=ResourceKind.ROLE, name="R", comment="it's a role")

        assert ddl.render_create(spec, CreateMode.OR_REPLACE) == "CREATE OR REPLACE ROLE R COMMENT = 'it\\'s a role'"


class TestRenderOther:
    """Tests for DROP, SHOW, ALTER and GRANT statements."""

    def test_drop_cascades_for_containers(self) -> None:
        assert ddl.render_drop(ResourceKind.DATABASE, "DB") == "DROP DATABASE IF EXISTS DB CASCADE"
        assert ddl.render_drop(ResourceKind.COMPUTE_POOL, "POOL") == "DROP COMPUTE POOL IF EXISTS POOL"

    def test_show_single_object(self) -> None:
        assert ddl.render_show(ResourceKind.STAGE, TEST_STAGE) == (
            f"SHOW STAGES LIKE 'NOTEBOOK_STG' IN SCHEMA {TEST_SCHEMA}"
        )
        assert ddl.render_show(ResourceKind.SCHEMA, "DB.S") == "SHOW SCHEMAS LIKE 'S' IN DATABASE DB"
        assert ddl.render_show(ResourceKind.ROLE, "R") == "SHOW ROLES LIKE 'R'"

    def test_show_in_scope(self) -> None:
        assert ddl.render_show_in_scope(ResourceKind.SERVICE, TEST_SCHEMA) == f"SHOW SERVICES IN SCHEMA {TEST_SCHEMA}"
        assert ddl.render_show_in_scope(ResourceKind.WAREHOUSE, None) == "SHOW WAREHOUSES"

    def test_alter_set(self) -> None:
        statement = ddl.render_alter_set(
            ResourceKind.NOTEBOOK, f"{TEST_SCHEMA}.NB", {"EXTERNAL_ACCESS_INTEGRATIONS": ["ALLOW_ALL_EAI"]}
        )
        assert statement == f"ALTER NOTEBOOK {TEST_SCHEMA}.NB SET EXTERNAL_ACCESS_INTEGRATIONS = (ALLOW_ALL_EAI)"

    def test_grants(self) -> None:
        assert ddl.render_grant(["USAGE"], ResourceKind.EXTERNAL_ACCESS_INTEGRATION, "EAI", "R") == (
            "GRANT USAGE ON INTEGRATION EAI TO ROLE R"
        )
        assert ddl.render_grant(["READ", "WRITE"], ResourceKind.STAGE, TEST_STAGE, "R") == (
            f"GRANT READ, WRITE ON STAGE {TEST_STAGE} TO ROLE R"
        )
        assert ddl.render_grant_database_role("SNOWFLAKE.CORTEX_USER", "R") == (
            "GRANT DATABASE ROLE SNOWFLAKE.CORTEX_USER TO ROLE R"
        )
        assert ddl.render_grant_role_to_user("R", "jane.doe") == 'GRANT ROLE R TO USER "jane.doe"'
