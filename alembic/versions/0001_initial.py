"""initial schema: users, startups, convocatorias, applicants, evaluations

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(120)),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50)),
        *_timestamps(),
    )

    op.create_table(
        'startups',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('founder_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('industry', sa.String(80)),
        sa.Column('founded_year', sa.Integer),
        sa.Column('website', sa.String(255)),
        sa.Column('status', sa.String(20)),
        *_timestamps(),
    )

    op.create_table(
        'members',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('startup_id', sa.Integer, sa.ForeignKey('startups.id'), nullable=False, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id')),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('role', sa.String(80)),
        *_timestamps(),
    )

    op.create_table(
        'convocatorias',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('titulo', sa.String(200), nullable=False),
        sa.Column('descripcion', sa.Text, nullable=False),
        sa.Column('tipo', sa.String(50)),
        sa.Column('fecha_inicio', sa.Date, nullable=False),
        sa.Column('fecha_fin', sa.Date, nullable=False),
        sa.Column('estado', sa.String(20)),
        sa.Column('created_by_id', sa.Integer, sa.ForeignKey('users.id')),
        sa.Column('published_at', sa.DateTime),
        *_timestamps(),
    )

    op.create_table(
        'criteria',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('convocatoria_id', sa.Integer, sa.ForeignKey('convocatorias.id'), nullable=False, index=True),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('prompt', sa.Text, nullable=False),
        sa.Column('weight', sa.Float, nullable=False),
        sa.Column('required', sa.Boolean, nullable=False),
        sa.Column('order', sa.Integer, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'applicants',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('startup_id', sa.Integer, sa.ForeignKey('startups.id'), nullable=False, index=True),
        sa.Column('convocatoria_id', sa.Integer, sa.ForeignKey('convocatorias.id'), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('submitted_at', sa.DateTime),
        *_timestamps(),
        sa.UniqueConstraint('startup_id', 'convocatoria_id', name='uq_applicant_startup_convocatoria'),
    )

    op.create_table(
        'answers',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('applicant_id', sa.Integer, sa.ForeignKey('applicants.id'), nullable=False, index=True),
        sa.Column('criterion_id', sa.Integer, sa.ForeignKey('criteria.id'), nullable=False),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('order', sa.Integer, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('applicant_id', 'criterion_id', name='uq_answer_applicant_criterion'),
    )

    op.create_table(
        'evaluations',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('applicant_id', sa.Integer, sa.ForeignKey('applicants.id'), nullable=False, unique=True),
        sa.Column('evaluator_id', sa.Integer, sa.ForeignKey('users.id')),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('total_score', sa.Float),
        sa.Column('recommendation', sa.String(20)),
        sa.Column('decision', sa.String(20)),
        sa.Column('per_category', sa.JSON),
        sa.Column('confidence', sa.Float),
        sa.Column('analysis', sa.JSON),
        sa.Column('model_version', sa.String(50)),
        sa.Column('comment', sa.Text),
        sa.Column('completed_at', sa.DateTime),
        *_timestamps(),
    )

    op.create_table(
        'criterion_scores',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('evaluation_id', sa.Integer, sa.ForeignKey('evaluations.id'), nullable=False, index=True),
        sa.Column('criterion_id', sa.Integer, sa.ForeignKey('criteria.id'), nullable=False),
        sa.Column('source', sa.String(10), nullable=False),
        sa.Column('raw_score', sa.Float, nullable=False),
        sa.Column('justification', sa.Text),
        sa.Column('recommendations', sa.Text),
        sa.Column('confidence', sa.Float),
        *_timestamps(),
        sa.UniqueConstraint('evaluation_id', 'criterion_id', 'source', name='uq_score_eval_criterion_source'),
    )


def downgrade():
    for name in ('criterion_scores', 'evaluations', 'answers', 'applicants', 'criteria',
                 'convocatorias', 'members', 'startups', 'users'):
        op.drop_table(name)
