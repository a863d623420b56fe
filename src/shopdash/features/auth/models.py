from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


class Admin(TimestampMixin):
    """The one administrator account that owns the dashboard."""

    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(max_length=27, unique=True, default=generate_ksuid, db_index=True)
    full_name = fields.CharField(max_length=255)
    username = fields.CharField(max_length=100, unique=True, db_index=True)
    hashed_password = fields.CharField(max_length=255)
    hashed_pin = fields.CharField(max_length=255)
    # Lengths of the plain secrets, so the profile view can mask them
    password_length = fields.IntField(default=0)
    pin_length = fields.IntField(default=0)

    def __str__(self):
        return f"{self.username} ({self.full_name})"

    class Meta:
        table = "admin"
