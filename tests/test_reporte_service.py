"""
Tests for the budget report service (grouping, slicing, dispatch).
"""
import pytest

from app.schemas.common import PaginationParams
from app.schemas.reporte import TipoReporte
from app.services import reporte_service


def _por_clave(filas, clave="id"):
    return {fila[clave]: fila for fila in filas}


class TestTipoReporte:
    def test_parse_is_case_insensitive(self):
        assert TipoReporte.parse("POR_FACULTAD") is TipoReporte.POR_FACULTAD
        assert TipoReporte.parse("  Por_Anio ") is TipoReporte.POR_ANIO

    def test_parse_accepts_english_aliases(self):
        assert TipoReporte.parse("by_faculty") is TipoReporte.POR_FACULTAD
        assert TipoReporte.parse("BY_YEAR") is TipoReporte.POR_ANIO
        assert TipoReporte.parse("by_line_item") is TipoReporte.POR_RUBRO

    def test_parse_rejects_unknown_type(self):
        with pytest.raises(ValueError, match="no válido"):
            TipoReporte.parse("por_ciudad")


class TestAgrupar:
    def test_faculty_totals_sum_disponibilidad(self, db_session, datos):
        filas = reporte_service.agrupar(db_session, TipoReporte.POR_FACULTAD)

        assert len(filas) == 2
        ing = _por_clave(filas)[datos["ingenieria"].id]
        assert ing["nombre_facultad"] == "Ingeniería"
        assert ing["disponibilidad_total"] == 150.0
        assert ing["egreso_total"] == 30.0
        assert ing["reserva_total"] == 5.0

    def test_initial_budget_is_truncated_to_int(self, db_session, datos):
        filas = reporte_service.agrupar(db_session, TipoReporte.POR_FACULTAD)
        ing = _por_clave(filas)[datos["ingenieria"].id]

        # 1000.75 + 500.50 = 1501.25
        assert ing["presupuesto_inicial"] == 1501
        assert isinstance(ing["presupuesto_inicial"], int)
        assert isinstance(ing["presupuesto_inicial_proyectos"], int)

    def test_initial_allocations_merged_by_group(self, db_session, datos):
        filas = _por_clave(reporte_service.agrupar(db_session, TipoReporte.POR_FACULTAD))

        assert filas[datos["ingenieria"].id]["presupuesto_inicial_proyectos"] == 1500
        assert filas[datos["ciencias"].id]["presupuesto_inicial_proyectos"] == 0

    def test_group_report(self, db_session, datos):
        filas = _por_clave(reporte_service.agrupar(db_session, TipoReporte.POR_GRUPO))

        assert filas[datos["grupo_ing"].id]["nombre_grupo"] == "Robótica"
        assert filas[datos["grupo_cie"].id]["disponibilidad_total"] == 300.0

    def test_seedbed_report_skips_projects_without_seedbed(self, db_session, datos):
        filas = reporte_service.agrupar(db_session, TipoReporte.POR_SEMILLERO)

        assert len(filas) == 1
        assert filas[0]["nombre_semillero"] == "Drones"
        assert filas[0]["disponibilidad_total"] == 150.0

    def test_year_report_keys_are_integers(self, db_session, datos):
        filas = _por_clave(
            reporte_service.agrupar(db_session, TipoReporte.POR_ANIO), "anio_inicio"
        )

        assert set(filas) == {2023, 2024}
        assert all(isinstance(anio, int) for anio in filas)
        assert filas[2023]["disponibilidad_total"] == 150.0
        assert filas[2023]["presupuesto_inicial_proyectos"] == 1500
        assert filas[2024]["presupuesto_inicial"] == 2000
        assert filas[2024]["presupuesto_inicial_proyectos"] == 0

    def test_rubro_report_joins_allocations_by_rubro(self, db_session, datos):
        filas = _por_clave(reporte_service.agrupar(db_session, TipoReporte.POR_RUBRO))

        equipos = filas[datos["equipos"].id]
        assert equipos["nombre_rubro"] == "Equipos"
        assert equipos["disponibilidad_total"] == 400.5
        assert equipos["presupuesto_inicial"] == 3000
        # The allocation without rubro belongs to no rubro group
        assert equipos["presupuesto_inicial_proyectos"] == 1200
        assert filas[datos["viaticos"].id]["presupuesto_inicial_proyectos"] == 0

    def test_project_report(self, db_session, datos):
        filas = _por_clave(reporte_service.agrupar(db_session, TipoReporte.POR_PROYECTO))

        p1 = filas[datos["p1"].id]
        assert p1["numero_proyecto"] == "P-001"
        assert p1["nombre_proyecto"] == "Dron de monitoreo agrícola"
        assert p1["disponibilidad_total"] == 150.0
        assert filas[datos["p2"].id]["presupuesto_inicial_proyectos"] == 0

    def test_empty_database_yields_no_rows(self, db_session):
        assert reporte_service.agrupar(db_session, TipoReporte.POR_FACULTAD) == []


# (tipo, filter value from the datos fixture, column of an entry that must match it)
SLICES = [
    (TipoReporte.POR_FACULTAD, lambda d: d["ingenieria"].id, lambda e: e.proyecto.facultad_id),
    (TipoReporte.POR_GRUPO, lambda d: d["grupo_ing"].id, lambda e: e.proyecto.grupo_id),
    (TipoReporte.POR_SEMILLERO, lambda d: d["semillero"].id, lambda e: e.proyecto.semillero_id),
    (TipoReporte.POR_ANIO, lambda d: 2023, lambda e: e.proyecto.fecha_inicio.year),
    (TipoReporte.POR_RUBRO, lambda d: d["equipos"].id, lambda e: e.rubro_id),
    (TipoReporte.POR_PROYECTO, lambda d: d["p1"].id, lambda e: e.proyecto_id),
]


class TestFiltrar:
    @pytest.mark.parametrize(
        "tipo, filtro_de, columna", SLICES, ids=[tipo.value for tipo, _, _ in SLICES]
    )
    def test_every_entry_matches_the_filter(self, db_session, datos, tipo, filtro_de, columna):
        filtro = filtro_de(datos)

        entradas = reporte_service.filtrar(db_session, tipo, filtro).all()

        assert len(entradas) == 2
        assert {columna(e) for e in entradas} == {filtro}

    def test_slices_cover_every_report_type(self):
        assert {tipo for tipo, _, _ in SLICES} == set(TipoReporte)

    def test_only_entries_of_the_requested_faculty(self, db_session, datos):
        entradas = reporte_service.filtrar(
            db_session, TipoReporte.POR_FACULTAD, datos["ingenieria"].id
        ).all()

        assert len(entradas) == 2
        assert {e.proyecto.facultad_id for e in entradas} == {datos["ingenieria"].id}

    def test_filter_by_year(self, db_session, datos):
        entradas = reporte_service.filtrar(db_session, TipoReporte.POR_ANIO, 2024).all()

        assert [e.descripcion for e in entradas] == ["Secuenciador"]

    def test_filter_by_rubro(self, db_session, datos):
        entradas = reporte_service.filtrar(
            db_session, TipoReporte.POR_RUBRO, datos["equipos"].id
        ).all()

        assert {e.rubro_id for e in entradas} == {datos["equipos"].id}
        assert len(entradas) == 2


class TestOpcionesFiltro:
    def test_catalogue_options_ordered_by_name(self, db_session, datos):
        opciones = reporte_service.opciones_filtro(db_session, TipoReporte.POR_FACULTAD)

        assert [o.nombre for o in opciones] == ["Ciencias", "Ingeniería"]

    def test_year_options_are_distinct_start_years(self, db_session, datos):
        opciones = reporte_service.opciones_filtro(db_session, TipoReporte.POR_ANIO)

        assert [o.id for o in opciones] == [2023, 2024]
        assert opciones[0].nombre == "2023"


class TestGenerarReporte:
    def test_without_type_lists_every_entry(self, db_session, datos):
        reporte = reporte_service.generar_reporte(db_session)

        assert reporte.agrupado is False
        assert reporte.tipo is None
        assert reporte.total == 3
        assert {"numero_proyecto", "nombre_rubro", "disponibilidad"} <= set(reporte.filas[0])

    def test_type_without_filter_is_grouped(self, db_session, datos):
        reporte = reporte_service.generar_reporte(db_session, "POR_FACULTAD")

        assert reporte.agrupado is True
        assert reporte.tipo is TipoReporte.POR_FACULTAD
        assert reporte.total == 2

    def test_type_with_filter_returns_slice(self, db_session, datos):
        reporte = reporte_service.generar_reporte(
            db_session, "por_facultad", datos["ciencias"].id
        )

        assert reporte.agrupado is False
        assert reporte.filtro == datos["ciencias"].id
        assert [f["descripcion"] for f in reporte.filas] == ["Secuenciador"]

    def test_year_filter_uses_years_not_ids(self, db_session, datos):
        reporte = reporte_service.generar_reporte(db_session, "por_anio", 2023)

        assert reporte.total == 2

    def test_pagination_applies_to_listings(self, db_session, datos):
        reporte = reporte_service.generar_reporte(
            db_session, paginacion=PaginationParams(page=2, page_size=2)
        )

        assert reporte.total == 3
        assert len(reporte.filas) == 1

    def test_unknown_type_raises(self, db_session, datos):
        with pytest.raises(ValueError):
            reporte_service.generar_reporte(db_session, "por_ciudad")

    def test_filter_outside_options_raises(self, db_session, datos):
        with pytest.raises(ValueError, match="no válida"):
            reporte_service.generar_reporte(db_session, "por_facultad", 9999)

    def test_filter_without_type_raises(self, db_session, datos):
        with pytest.raises(ValueError):
            reporte_service.generar_reporte(db_session, None, 1)
