"""initial_schema

Crea las tablas del sistema de presupuestos de investigación: jerarquía
organizacional (facultades, grupos, semilleros), investigadores, rubros,
proyectos, presupuestos, presupuesto inicial por proyecto y usuarios.

Revision ID: 3c8d1f0a7e21
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c8d1f0a7e21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'facultades',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(200), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nombre'),
    )

    op.create_table(
        'grupos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(200), nullable=False),
        sa.Column('facultad_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ['facultad_id'], ['facultades.id'], ondelete='CASCADE', onupdate='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_grupos_facultad_id', 'grupos', ['facultad_id'])

    op.create_table(
        'semilleros',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(200), nullable=False),
        sa.Column('grupo_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['grupo_id'], ['grupos.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_semilleros_grupo_id', 'semilleros', ['grupo_id'])

    op.create_table(
        'investigadores',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(300), nullable=False),
        sa.Column('documento', sa.String(30), nullable=False),
        sa.Column('email', sa.String(200), nullable=True),
        sa.Column('grupo_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['grupo_id'], ['grupos.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('documento'),
    )
    op.create_index('ix_investigadores_grupo_id', 'investigadores', ['grupo_id'])

    op.create_table(
        'rubros',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(200), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nombre'),
    )

    op.create_table(
        'proyectos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('numero_proyecto', sa.String(50), nullable=False),
        sa.Column('nombre', sa.String(500), nullable=True),
        sa.Column('fecha_inicio', sa.Date(), nullable=True),
        sa.Column('fecha_fin', sa.Date(), nullable=True),
        sa.Column('facultad_id', sa.Integer(), nullable=False),
        sa.Column('grupo_id', sa.Integer(), nullable=True),
        sa.Column('semillero_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['facultad_id'], ['facultades.id']),
        sa.ForeignKeyConstraint(['grupo_id'], ['grupos.id']),
        sa.ForeignKeyConstraint(['semillero_id'], ['semilleros.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('numero_proyecto'),
    )
    op.create_index('ix_proyectos_facultad_id', 'proyectos', ['facultad_id'])
    op.create_index('ix_proyectos_grupo_id', 'proyectos', ['grupo_id'])
    op.create_index('ix_proyectos_semillero_id', 'proyectos', ['semillero_id'])

    op.create_table(
        'presupuestos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('descripcion', sa.String(500), nullable=True),
        sa.Column('disponibilidad', sa.Numeric(precision=15, scale=2), server_default='0', nullable=False),
        sa.Column('egreso', sa.Numeric(precision=15, scale=2), server_default='0', nullable=False),
        sa.Column('reserva', sa.Numeric(precision=15, scale=2), server_default='0', nullable=False),
        sa.Column('valor_inicial', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('proyecto_id', sa.Integer(), nullable=False),
        sa.Column('rubro_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['proyecto_id'], ['proyectos.id']),
        sa.ForeignKeyConstraint(['rubro_id'], ['rubros.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_presupuestos_proyecto_id', 'presupuestos', ['proyecto_id'])
    op.create_index('ix_presupuestos_rubro_id', 'presupuestos', ['rubro_id'])

    op.create_table(
        'presupuesto_inicial_proyectos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('proyecto_id', sa.Integer(), nullable=False),
        sa.Column('rubro_id', sa.Integer(), nullable=True),
        sa.Column('valor_inicial', sa.Numeric(precision=15, scale=2), server_default='0', nullable=False),
        sa.ForeignKeyConstraint(['proyecto_id'], ['proyectos.id']),
        sa.ForeignKeyConstraint(['rubro_id'], ['rubros.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_presupuesto_inicial_proyectos_proyecto_id',
        'presupuesto_inicial_proyectos',
        ['proyecto_id'],
    )
    op.create_index(
        'ix_presupuesto_inicial_proyectos_rubro_id',
        'presupuesto_inicial_proyectos',
        ['rubro_id'],
    )

    op.create_table(
        'usuarios',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(200), nullable=False),
        sa.Column('password_hash', sa.String(200), nullable=False),
        sa.Column('nombre_completo', sa.String(300), nullable=True),
        sa.Column('rol', sa.String(50), nullable=True),
        sa.Column('activo', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('ultimo_acceso', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
    )


def downgrade() -> None:
    op.drop_table('usuarios')
    op.drop_index('ix_presupuesto_inicial_proyectos_rubro_id', table_name='presupuesto_inicial_proyectos')
    op.drop_index('ix_presupuesto_inicial_proyectos_proyecto_id', table_name='presupuesto_inicial_proyectos')
    op.drop_table('presupuesto_inicial_proyectos')
    op.drop_index('ix_presupuestos_rubro_id', table_name='presupuestos')
    op.drop_index('ix_presupuestos_proyecto_id', table_name='presupuestos')
    op.drop_table('presupuestos')
    op.drop_index('ix_proyectos_semillero_id', table_name='proyectos')
    op.drop_index('ix_proyectos_grupo_id', table_name='proyectos')
    op.drop_index('ix_proyectos_facultad_id', table_name='proyectos')
    op.drop_table('proyectos')
    op.drop_table('rubros')
    op.drop_index('ix_investigadores_grupo_id', table_name='investigadores')
    op.drop_table('investigadores')
    op.drop_index('ix_semilleros_grupo_id', table_name='semilleros')
    op.drop_table('semilleros')
    op.drop_index('ix_grupos_facultad_id', table_name='grupos')
    op.drop_table('grupos')
    op.drop_table('facultades')
