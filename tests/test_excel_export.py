"""
Tests for the xlsx builder and the report export service.
"""
from app.exporters.excel_exporter import ExcelExporter
from app.schemas.reporte import TipoReporte
from app.services import exportacion_service


def test_exporter_produces_xlsx_bytes():
    exporter = ExcelExporter(title="Prueba", filters={"Reporte": "por_rubro"})
    exporter.add_header()
    exporter.add_totals_row({"Disponibilidad": 10.5})
    exporter.add_data_table(["Rubro", "Disponibilidad"], [["Equipos", 10.5], ["Viáticos", 0.0]])

    contenido = exporter.finalize()

    assert contenido[:2] == b"PK"


def test_export_service_for_every_report_type(db_session, datos):
    for tipo in TipoReporte:
        contenido = exportacion_service.export_reporte_excel(db_session, tipo)
        assert contenido[:2] == b"PK"


def test_export_service_with_no_data(db_session):
    contenido = exportacion_service.export_reporte_excel(db_session, TipoReporte.POR_ANIO)

    assert contenido[:2] == b"PK"
