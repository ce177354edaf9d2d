from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
import sqlmodel

revision: str = "5c1e7a9d2b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "language",
        sa.Column("code", sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column(
            "flag_icon", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True
        ),
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_language_code"), "language", ["code"], unique=True)
    op.create_index(op.f("ix_language_active"), "language", ["active"], unique=False)
    op.create_index(
        op.f("ix_language_is_default"), "language", ["is_default"], unique=False
    )

    op.create_table(
        "category",
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column(
            "description", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True
        ),
        sa.Column("slug", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=False),
        sa.Column(
            "parent_id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=True
        ),
        sa.ForeignKeyConstraint(["parent_id"], ["category.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_category_slug"), "category", ["slug"], unique=True)
    op.create_index(
        op.f("ix_category_parent_id"), "category", ["parent_id"], unique=False
    )

    op.create_table(
        "translation",
        sa.Column(
            "namespace", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False
        ),
        sa.Column("key", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("value", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=False),
        sa.Column(
            "language_id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=False
        ),
        sa.Column(
            "category_id", sqlmodel.sql.sqltypes.AutoString(length=22), nullable=True
        ),
        sa.ForeignKeyConstraint(["language_id"], ["language.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "language_id",
            "namespace",
            "key",
            name="uq_translation_language_namespace_key",
        ),
    )
    op.create_index(
        "idx_translation_language_namespace",
        "translation",
        ["language_id", "namespace"],
        unique=False,
    )
    op.create_index(
        op.f("ix_translation_category_id"), "translation", ["category_id"], unique=False
    )

    op.create_table(
        "third_party_config",
        sa.Column("code", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("type", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("value", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("group", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_third_party_config_code"), "third_party_config", ["code"], unique=False
    )
    op.create_index(
        op.f("ix_third_party_config_type"), "third_party_config", ["type"], unique=False
    )
    op.create_index(
        op.f("ix_third_party_config_group"), "third_party_config", ["group"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_third_party_config_group"), table_name="third_party_config")
    op.drop_index(op.f("ix_third_party_config_type"), table_name="third_party_config")
    op.drop_index(op.f("ix_third_party_config_code"), table_name="third_party_config")
    op.drop_table("third_party_config")
    op.drop_index(op.f("ix_translation_category_id"), table_name="translation")
    op.drop_index("idx_translation_language_namespace", table_name="translation")
    op.drop_table("translation")
    op.drop_index(op.f("ix_category_parent_id"), table_name="category")
    op.drop_index(op.f("ix_category_slug"), table_name="category")
    op.drop_table("category")
    op.drop_index(op.f("ix_language_is_default"), table_name="language")
    op.drop_index(op.f("ix_language_active"), table_name="language")
    op.drop_index(op.f("ix_language_code"), table_name="language")
    op.drop_table("language")
