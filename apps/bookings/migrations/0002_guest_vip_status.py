from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="guest",
            name="vip_status",
            field=models.BooleanField(default=False),
        ),
    ]
