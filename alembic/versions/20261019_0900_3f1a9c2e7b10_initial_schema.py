"""initial_schema

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1a9c2e7b10'
down_revision = None
branch_labels = None
depends_on = None


employee_status = sa.Enum('activo', 'inactivo', name='employeestatus')
visibility = sa.Enum('publico', 'archivado', name='visibility')
bank_status = sa.Enum('pendiente', 'parcial', 'aplicado', 'anulado', name='bankstatus')


def upgrade() -> None:
    op.create_table(
        'empleados',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('cedula', sa.String(20), nullable=False),
        sa.Column('nombre', sa.String(255), nullable=False),
        sa.Column('estado', employee_status, nullable=False, server_default='activo'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_empleados_cedula', 'empleados', ['cedula'], unique=True)

    op.create_table(
        'observaciones',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('empleado_id', sa.String(36), sa.ForeignKey('empleados.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tipo_novedad', sa.String(50), nullable=False),
        sa.Column('observacion', sa.Text(), nullable=True),
        sa.Column('fecha_novedad', sa.Date(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_observaciones_empleado_id', 'observaciones', ['empleado_id'])

    op.create_table(
        'horas_compensacion',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('empleado_id', sa.String(36), sa.ForeignKey('empleados.id', ondelete='CASCADE'), nullable=False),
        sa.Column('semana_inicio', sa.Date(), nullable=False),
        sa.Column('semana_fin', sa.Date(), nullable=False),
        sa.Column('horas_excedidas', sa.Float(), nullable=False, server_default='0'),
        sa.Column('horas_pendientes', sa.Float(), nullable=False, server_default='0'),
        sa.Column('estado', bank_status, nullable=False, server_default='pendiente'),
        sa.Column('semana_aplicada_inicio', sa.Date(), nullable=True),
        sa.Column('semana_aplicada_fin', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_horas_compensacion_empleado_id', 'horas_compensacion', ['empleado_id'])
    op.create_index('ix_horas_compensacion_semana_inicio', 'horas_compensacion', ['semana_inicio'])

    op.create_table(
        'horarios',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('empleado_id', sa.String(36), sa.ForeignKey('empleados.id', ondelete='CASCADE'), nullable=False),
        sa.Column('fecha_inicio', sa.Date(), nullable=False),
        sa.Column('fecha_fin', sa.Date(), nullable=False),
        sa.Column('total_horas_semana', sa.Float(), nullable=False, server_default='0'),
        sa.Column('creado_por', sa.String(255), nullable=True),
        sa.Column('estado_visibilidad', visibility, nullable=False, server_default='publico'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_horarios_empleado_id', 'horarios', ['empleado_id'])
    op.create_index('ix_horarios_fecha_inicio', 'horarios', ['fecha_inicio'])

    op.create_table(
        'horario_dias',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('horario_id', sa.String(36), sa.ForeignKey('horarios.id', ondelete='CASCADE'), nullable=False),
        sa.Column('fecha', sa.Date(), nullable=False),
        sa.Column('descripcion', sa.String(20), nullable=False),
        sa.Column('horas', sa.Float(), nullable=False, server_default='0'),
        sa.Column('horas_base', sa.Float(), nullable=False, server_default='0'),
        sa.Column('horas_extra', sa.Float(), nullable=False, server_default='0'),
        sa.Column('bloques', sa.JSON(), nullable=False),
        sa.Column('jornada_entrada', sa.String(5), nullable=True),
        sa.Column('jornada_salida', sa.String(5), nullable=True),
        sa.Column('jornada_reducida', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tipo_jornada_reducida', sa.String(20), nullable=True),
        sa.Column('domingo_estado', sa.String(20), nullable=True),
        sa.Column('es_festivo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('festivo_trabajado', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('festivo_nombre', sa.String(255), nullable=True),
        sa.Column('es_laborable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('horas_reducidas_manualmente', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('horas_originales', sa.Float(), nullable=True),
        sa.Column('horas_extra_reducidas', sa.Float(), nullable=False, server_default='0'),
        sa.Column('horas_legales_reducidas', sa.Float(), nullable=False, server_default='0'),
        sa.Column('banco_compensacion_id', sa.String(36), sa.ForeignKey('horas_compensacion.id'), nullable=True),
        sa.Column('bloqueado_por', sa.JSON(), nullable=False),
    )
    op.create_index('ix_horario_dias_horario_id', 'horario_dias', ['horario_id'])

    op.create_table(
        'festivos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('country_code', sa.String(2), nullable=False, server_default='CO'),
        sa.Column('fecha', sa.Date(), nullable=False),
        sa.Column('nombre', sa.String(255), nullable=False),
        sa.Column('descripcion', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('country_code', 'fecha', name='uq_festivo_country_fecha'),
    )
    op.create_index('ix_festivos_fecha', 'festivos', ['fecha'])


def downgrade() -> None:
    op.drop_index('ix_festivos_fecha', table_name='festivos')
    op.drop_table('festivos')
    op.drop_index('ix_horario_dias_horario_id', table_name='horario_dias')
    op.drop_table('horario_dias')
    op.drop_index('ix_horarios_fecha_inicio', table_name='horarios')
    op.drop_index('ix_horarios_empleado_id', table_name='horarios')
    op.drop_table('horarios')
    op.drop_index('ix_horas_compensacion_semana_inicio', table_name='horas_compensacion')
    op.drop_index('ix_horas_compensacion_empleado_id', table_name='horas_compensacion')
    op.drop_table('horas_compensacion')
    op.drop_index('ix_observaciones_empleado_id', table_name='observaciones')
    op.drop_table('observaciones')
    op.drop_index('ix_empleados_cedula', table_name='empleados')
    op.drop_table('empleados')
    bank_status.drop(op.get_bind(), checkfirst=True)
    visibility.drop(op.get_bind(), checkfirst=True)
    employee_status.drop(op.get_bind(), checkfirst=True)
