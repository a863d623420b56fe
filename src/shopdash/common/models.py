"""Model helpers shared by the shopdash features.

Products, stock rows and orders are addressed from the dashboard by a public
KSUID rather than their integer primary key; ``generate_ksuid`` is the default
for those ``public_id`` columns. ``TimestampMixin`` adds the audit timestamps
that the admin, product and order tables carry."""

from tortoise import fields, models
from ksuid import ksuid


def generate_ksuid():
    """Return a new KSUID string for a ``public_id`` column."""
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True
