import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _seed_admin_user() -> None:
    """Create the configured admin user if it does not exist yet."""
    from app.database import SessionLocal
    from app.models.usuario import Usuario
    from app.utils.security import hash_password

    db = SessionLocal()
    try:
        admin = db.query(Usuario).filter(Usuario.username == settings.ADMIN_USERNAME).first()
        if admin is None:
            db.add(
                Usuario(
                    username=settings.ADMIN_USERNAME,
                    email=settings.ADMIN_EMAIL,
                    password_hash=hash_password(settings.ADMIN_PASSWORD),
                    nombre_completo="Administrador",
                    rol="ADMIN",
                    activo=True,
                )
            )
            db.commit()
            logger.info("Admin user '%s' created", settings.ADMIN_USERNAME)
        else:
            logger.info("Admin user '%s' already exists", settings.ADMIN_USERNAME)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Could not seed admin user: %s", exc)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure someone can log in
    _seed_admin_user()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from app.routers import auth  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

# Budget reports (grouped totals and filtered listings)
from app.routers import reportes  # noqa: E402

app.include_router(
    reportes.router,
    prefix="/api/reportes",
    tags=["Reportes"],
)

# Budget entries CRUD
from app.routers import presupuesto  # noqa: E402

app.include_router(
    presupuesto.router,
    prefix="/api/presupuestos",
    tags=["Presupuestos"],
)

# Initial project allocations CRUD
from app.routers import presupuestos_iniciales  # noqa: E402

app.include_router(
    presupuestos_iniciales.router,
    prefix="/api/presupuestos-iniciales",
    tags=["Presupuestos Iniciales"],
)

# CSV import
from app.routers import importacion  # noqa: E402

app.include_router(
    importacion.router,
    prefix="/api/importacion",
    tags=["Importación"],
)

# Master data / dropdown sources
from app.routers import datos_maestros  # noqa: E402

app.include_router(
    datos_maestros.router,
    prefix="/api/datos-maestros",
    tags=["Datos Maestros"],
)

# Exportación (Excel)
from app.routers import exportacion  # noqa: E402

app.include_router(
    exportacion.router,
    prefix="/api/exportar",
    tags=["Exportación"],
)
