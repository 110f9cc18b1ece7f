from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("payment_system", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="approved_transaction_id",
            field=models.CharField(
                blank=True,
                help_text="Gateway reference of an approved charge not yet settled",
                max_length=128,
                null=True,
            ),
        ),
        migrations.AddConstraint(
            model_name="order",
            constraint=models.UniqueConstraint(
                condition=models.Q(("status__in", ["pending", "processing"])),
                fields=("buyer", "project"),
                name="order_one_open_per_buyer_project",
            ),
        ),
    ]
