"""Add PostgreSQL exclusion constraint preventing overlapping cabin bookings.

For a given cabin, the [start_at, end_at) ranges of CONFIRMED bookings cannot
overlap. Cancelled bookings are excluded by the WHERE clause.

- btree_gist is required to combine ``cabin_id WITH =`` with a range operator
- tstzrange with '[)' bounds matches the service-level rule: a booking may
  start exactly when another ends
- On other backends this migration is a no-op and the service-level check
  under the cabin row lock is the only guard
"""

from django.db import migrations

CREATE_SQL = [
    "CREATE EXTENSION IF NOT EXISTS btree_gist;",
    """
    ALTER TABLE django_hunting_cabinbooking
    ADD CONSTRAINT hunting_booking_no_overlap
    EXCLUDE USING GIST (
        cabin_id WITH =,
        tstzrange(start_at, end_at, '[)') WITH &&
    )
    WHERE (status = 'confirmed');
    """,
]

# btree_gist extension kept (may be used elsewhere)
DROP_SQL = [
    """
    ALTER TABLE django_hunting_cabinbooking
    DROP CONSTRAINT IF EXISTS hunting_booking_no_overlap;
    """,
]


def _run_on_postgresql(statements):
    def run(apps, schema_editor):
        if schema_editor.connection.vendor != "postgresql":
            return
        for sql in statements:
            schema_editor.execute(sql)

    return run


class Migration(migrations.Migration):

    dependencies = [
        ("django_hunting", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(
            _run_on_postgresql(CREATE_SQL),
            _run_on_postgresql(DROP_SQL),
        ),
    ]
