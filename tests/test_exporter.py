#!/usr/bin/env python3
"""
Catalog exporter tests: statement order, table exclusion, relationship
filtering and the single write at the end of a run.
"""

import pytest

from conftest import InMemoryCatalog, person_table
from core.errors import OutputError, RowCursorError
from core.export_report import ExportReport
from core.exporter import CatalogExporter, TableFilter
from core.schema_ir import ColumnIR, RelationshipIR, TableIR
from core.statement_document import StatementDocument
from core.type_registry import SourceType

ORDER_CREATE = "CREATE TABLE Order (`id` INT(11) NOT NULL AUTO_INCREMENT PRIMARY KEY, `Placed` DATETIME NULL DEFAULT NULL);"
LINE_ITEM_FK = "ALTER TABLE LineItem ADD FOREIGN KEY (`order_id`) REFERENCES Order(`id`);"


def simple_table(name, is_system=False):
    return TableIR(name, [ColumnIR("Id", SourceType.LONG)], is_system=is_system)


class TestTableFilter:

    @pytest.fixture
    def table_filter(self):
        return TableFilter(prefixes=("msys",), markers=("~",), names=("Name AutoCorrect Log",))

    def test_reserved_prefix_any_case(self, table_filter):
        assert table_filter.exclusion_reason("MSysObjects") == "reserved prefix"
        assert table_filter.exclusion_reason("msysACEs") == "reserved prefix"

    def test_marker(self, table_filter):
        assert table_filter.exclusion_reason("~TMPCLP123") == "reserved marker"

    def test_exact_name(self, table_filter):
        assert table_filter.exclusion_reason("Name AutoCorrect Log") == "excluded by name"
        assert not table_filter.is_excluded("name autocorrect log")

    def test_system_flag(self, table_filter):
        assert table_filter.exclusion_reason("Hidden", is_system=True) == "system table"
        assert table_filter.exclusion_reason("Customers") is None


class TestCatalogExporter:

    def test_statement_order(self, memory_catalog, config):
        document = CatalogExporter(memory_catalog, config).export(export_data=True)
        statements = document.statements

        assert len(statements) == 4
        assert statements[0] == ORDER_CREATE + \
            "\nINSERT INTO Order (id, Placed) VALUES\n(1, '2024-03-01 09:30:00');"
        assert statements[1].startswith("CREATE TABLE LineItem")
        assert statements[1].endswith("VALUES\n(1, 1, 12.5),\n(2, 1, 3.0);")
        assert statements[2] == ("CREATE TABLE Employee (`id` INT(11) DEFAULT 0 PRIMARY KEY, "
                                 "`manager_id` INT(11) DEFAULT 0, `BirthDate` DATE NULL DEFAULT NULL);")
        assert statements[3] == LINE_ITEM_FK

    def test_render_separates_with_blank_line(self, memory_catalog, config):
        document = CatalogExporter(memory_catalog, config).export(export_data=False)
        rendered = document.render()
        assert rendered.startswith(ORDER_CREATE + "\n\nCREATE TABLE LineItem")
        assert rendered.endswith("\n\n" + LINE_ITEM_FK)
        assert "INSERT" not in rendered

    def test_schema_only_reads_no_rows(self, memory_catalog, config):
        CatalogExporter(memory_catalog, config).export(export_data=False)
        assert memory_catalog.cursors_opened == []

    def test_excluded_tables_are_reported(self, config):
        tables = [simple_table("MSysObjects"), simple_table("~TMP01"),
                  simple_table("Name AutoCorrect Log"), simple_table("Hidden", is_system=True),
                  simple_table("Customers")]
        report = ExportReport("memory://test")
        document = CatalogExporter(InMemoryCatalog(tables), config, report=report).export()

        assert len(document) == 1
        assert document.statements[0].startswith("CREATE TABLE Customers")
        reasons = {s["name"]: s["reason"] for s in report.skipped_objects}
        assert reasons == {
            "MSysObjects": "reserved prefix",
            "~TMP01": "reserved marker",
            "Name AutoCorrect Log": "excluded by name",
            "Hidden": "system table",
        }

    def test_relationships_to_excluded_or_self_skipped(self, memory_catalog, config):
        report = ExportReport("memory://test")
        document = CatalogExporter(memory_catalog, config, report=report).export()

        foreign_keys = [s for s in document if s.startswith("ALTER TABLE")]
        assert foreign_keys == [LINE_ITEM_FK]
        skipped = {s["name"]: s["reason"] for s in report.skipped_objects}
        assert skipped["EmployeeManager"] == "self-referencing"
        assert skipped["MSysNavPaneLink"] == "references excluded table MSysObjects"
        assert any("EmployeeManager" in w for w in report.warnings)

    def test_relationship_to_system_flagged_table(self, config):
        tables = [simple_table("Hidden", is_system=True), simple_table("Visible")]
        rels = [RelationshipIR("HiddenVisible", "Hidden", "Visible", (("Id", "Id"),))]
        document = CatalogExporter(InMemoryCatalog(tables, relationships=rels), config).export()
        assert [s for s in document if s.startswith("ALTER")] == []

    def test_excluded_data_table_gets_schema(self, config):
        audit = TableIR("AuditLog", person_table().columns)
        catalog = InMemoryCatalog([audit], rows={"AuditLog": [(1, "x", True)]})
        document = CatalogExporter(catalog, config).export(export_data=True)
        assert len(document) == 1
        assert "INSERT" not in document.render()
        assert catalog.cursors_opened == []

    def test_appends_to_given_document(self, memory_catalog, config):
        document = StatementDocument()
        document.append("-- header")
        result = CatalogExporter(memory_catalog, config).export(document=document)
        assert result is document
        assert document.statements[0] == "-- header"


class TestRun:

    def test_writes_file_once(self, memory_catalog, config, tmp_path):
        output = tmp_path / "Orders.sql"
        exporter = CatalogExporter(memory_catalog, config)
        document = exporter.run(output, export_data=True)

        assert output.read_text(encoding="utf-8") == document.render()
        assert exporter.report.output_path == output
        assert exporter.report.total_rows == 3

    def test_no_file_when_rows_fail(self, tmp_path):
        catalog = InMemoryCatalog([person_table()], rows={"Person": [(1, "a", True), (2, "b", True)]},
                                  fail_after={"Person": 1})
        output = tmp_path / "Person.sql"
        with pytest.raises(RowCursorError):
            CatalogExporter(catalog).run(output, export_data=True)
        assert not output.exists()
        assert catalog.open_cursors == 0

    def test_unwritable_destination(self, memory_catalog, config, tmp_path):
        with pytest.raises(OutputError):
            CatalogExporter(memory_catalog, config).run(tmp_path / "missing" / "out.sql")
