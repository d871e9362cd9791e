"""
HTTP-level tests: routing, status codes and error mapping.
"""
import io
import zipfile

from sqlalchemy.exc import IntegrityError


def _csv(*filas: str) -> bytes:
    encabezado = "rubro,numero_proyecto,valor_inicial,disponibilidad,descripcion,egreso,reserva\n"
    return (encabezado + "".join(f"{fila}\n" for fila in filas)).encode("latin-1")


def test_health(make_client):
    response = make_client().get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def test_reports_require_token(make_client, datos):
    response = make_client().get("/api/reportes")

    assert response.status_code == 401


def test_login_and_me(make_client, admin):
    client = make_client()

    login = client.post("/api/auth/login", data={"username": "admin", "password": "Clave123!"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["rol"] == "ADMIN"


def test_login_with_wrong_password(make_client, admin):
    response = make_client().post(
        "/api/auth/login", data={"username": "admin", "password": "incorrecta"}
    )

    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Reportes
# ---------------------------------------------------------------------------


def test_grouped_report_by_query_string(client, datos):
    response = client.get("/api/reportes", params={"tipo": "POR_FACULTAD"})

    assert response.status_code == 200
    body = response.json()
    assert body["agrupado"] is True
    assert body["tipo"] == "por_facultad"
    totales = {fila["nombre_facultad"]: fila["disponibilidad_total"] for fila in body["filas"]}
    assert totales == {"Ingeniería": 150.0, "Ciencias": 300.0}


def test_grouped_report_by_path(client, datos):
    response = client.get("/api/reportes/por_anio")

    assert response.status_code == 200
    anios = sorted(fila["anio_inicio"] for fila in response.json()["filas"])
    assert anios == [2023, 2024]


def test_report_slice_with_filter(client, datos):
    response = client.get(
        "/api/reportes", params={"tipo": "por_rubro", "filtro": datos["viaticos"].id}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["agrupado"] is False
    assert [f["descripcion"] for f in body["filas"]] == ["Salida de campo"]


def test_plain_listing_is_paginated(client, datos):
    response = client.get("/api/reportes", params={"page": 1, "page_size": 2})

    body = response.json()
    assert body["total"] == 3
    assert len(body["filas"]) == 2


def test_unknown_report_type_is_422(client, datos):
    assert client.get("/api/reportes", params={"tipo": "por_ciudad"}).status_code == 422
    assert client.get("/api/reportes/por_ciudad").status_code == 422


def test_invalid_filter_is_422(client, datos):
    response = client.get("/api/reportes", params={"tipo": "por_grupo", "filtro": 9999})

    assert response.status_code == 422
    assert "9999" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Presupuestos
# ---------------------------------------------------------------------------


def test_create_update_delete_presupuesto(client, datos):
    creado = client.post(
        "/api/presupuestos",
        json={
            "descripcion": "Reactivos",
            "valor_inicial": "1200.50",
            "disponibilidad": "1200.50",
            "proyecto_id": datos["p1"].id,
            "rubro_id": datos["equipos"].id,
        },
    )
    assert creado.status_code == 201
    presupuesto_id = creado.json()["id"]
    assert creado.json()["valor_inicial"] == 1200.5

    actualizado = client.patch(f"/api/presupuestos/{presupuesto_id}", json={"egreso": 200})
    assert actualizado.status_code == 200
    assert actualizado.json()["egreso"] == 200.0

    assert client.delete(f"/api/presupuestos/{presupuesto_id}").status_code == 200
    assert client.get(f"/api/presupuestos/{presupuesto_id}").status_code == 404


def test_create_with_non_numeric_amount_is_422(client, datos):
    response = client.post(
        "/api/presupuestos",
        json={
            "valor_inicial": "mil",
            "proyecto_id": datos["p1"].id,
            "rubro_id": datos["equipos"].id,
        },
    )

    assert response.status_code == 422


def test_create_with_unknown_rubro_is_404(client, datos):
    response = client.post(
        "/api/presupuestos",
        json={"valor_inicial": 10, "proyecto_id": datos["p1"].id, "rubro_id": 9999},
    )

    assert response.status_code == 404


def test_read_only_role_cannot_write(make_client, consulta, datos):
    client = make_client(consulta)

    assert client.get("/api/presupuestos").status_code == 200
    response = client.post(
        "/api/presupuestos",
        json={
            "valor_inicial": 10,
            "proyecto_id": datos["p1"].id,
            "rubro_id": datos["equipos"].id,
        },
    )
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Presupuestos iniciales
# ---------------------------------------------------------------------------


def test_initial_allocation_crud_feeds_reports(client, datos):
    creado = client.post(
        "/api/presupuestos-iniciales",
        json={"proyecto_id": datos["p2"].id, "valor_inicial": "640.30"},
    )
    assert creado.status_code == 201
    asignacion_id = creado.json()["id"]
    assert creado.json()["rubro_id"] is None

    reporte = client.get("/api/reportes/por_proyecto").json()
    p2 = next(f for f in reporte["filas"] if f["id"] == datos["p2"].id)
    assert p2["presupuesto_inicial_proyectos"] == 640

    actualizado = client.patch(
        f"/api/presupuestos-iniciales/{asignacion_id}",
        json={"rubro_id": datos["equipos"].id},
    )
    assert actualizado.status_code == 200
    assert actualizado.json()["rubro_id"] == datos["equipos"].id

    assert client.delete(f"/api/presupuestos-iniciales/{asignacion_id}").status_code == 200
    assert client.get(f"/api/presupuestos-iniciales/{asignacion_id}").status_code == 404


def test_initial_allocation_for_unknown_project_is_404(client, datos):
    response = client.post(
        "/api/presupuestos-iniciales", json={"proyecto_id": 9999, "valor_inicial": 10}
    )

    assert response.status_code == 404


def test_initial_allocation_null_amount_is_422(client, datos):
    asignacion_id = client.get("/api/presupuestos-iniciales").json()[0]["id"]

    response = client.patch(
        f"/api/presupuestos-iniciales/{asignacion_id}", json={"valor_inicial": None}
    )

    assert response.status_code == 422


def test_read_only_role_cannot_write_initial_allocations(make_client, consulta, datos):
    client = make_client(consulta)

    listado = client.get("/api/presupuestos-iniciales", params={"proyecto_id": datos["p1"].id})
    assert listado.status_code == 200
    assert len(listado.json()) == 2
    response = client.post(
        "/api/presupuestos-iniciales",
        json={"proyecto_id": datos["p1"].id, "valor_inicial": 10},
    )
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Importación
# ---------------------------------------------------------------------------


def test_csv_upload_creates_rows(client, datos):
    response = client.post(
        "/api/importacion/presupuestos",
        files={"file": ("carga.csv", _csv("Equipos,P-001,100,90,Sensor,5,5"), "text/csv")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["registros_creados"] == 1
    assert body["archivo"] == "carga.csv"


def test_csv_upload_with_unknown_project_is_404(client, datos):
    response = client.post(
        "/api/importacion/presupuestos",
        files={"file": ("carga.csv", _csv("Equipos,P-999,100,90,Sensor,5,5"), "text/csv")},
    )

    assert response.status_code == 404
    assert "P-999" in response.json()["detail"]
    assert client.get("/api/presupuestos").json()["total"] == 3


def test_csv_upload_with_bad_amount_is_422(client, datos):
    response = client.post(
        "/api/importacion/presupuestos",
        files={"file": ("carga.csv", _csv("Equipos,P-001,xx,90,Sensor,5,5"), "text/csv")},
    )

    assert response.status_code == 422


def test_csv_upload_database_failure_is_500(client, db_session, datos, monkeypatch):
    def _commit_fallido():
        raise IntegrityError("INSERT INTO presupuestos", {}, Exception("constraint failed"))

    monkeypatch.setattr(db_session, "commit", _commit_fallido)

    response = client.post(
        "/api/importacion/presupuestos",
        files={"file": ("carga.csv", _csv("Equipos,P-001,100,90,Sensor,5,5"), "text/csv")},
    )

    assert response.status_code == 500
    assert "No se pudo importar CSV" in response.json()["detail"]
    monkeypatch.undo()
    assert client.get("/api/presupuestos").json()["total"] == 3


def test_csv_upload_requires_write_role(make_client, consulta, datos):
    response = make_client(consulta).post(
        "/api/importacion/presupuestos",
        files={"file": ("carga.csv", _csv("Equipos,P-001,100,90,Sensor,5,5"), "text/csv")},
    )

    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Datos maestros y exportación
# ---------------------------------------------------------------------------


def test_filter_options_for_year(client, datos):
    response = client.get("/api/datos-maestros/opciones-filtro/by_year")

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [2023, 2024]


def test_projects_filtered_by_faculty(client, datos):
    response = client.get(
        "/api/datos-maestros/proyectos", params={"facultad_id": datos["ciencias"].id}
    )

    assert [p["numero_proyecto"] for p in response.json()] == ["P-002"]


def test_excel_export(client, datos):
    response = client.get("/api/exportar/excel", params={"tipo": "por_facultad"})

    assert response.status_code == 200
    assert response.content[:2] == b"PK"
    assert "attachment" in response.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(response.content)) as xlsx:
        assert "xl/workbook.xml" in xlsx.namelist()


def test_excel_export_with_unknown_type_is_422(client, datos):
    response = client.get("/api/exportar/excel", params={"tipo": "todo"})

    assert response.status_code == 422
