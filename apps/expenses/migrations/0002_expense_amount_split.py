from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('expenses', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='expense',
            name='split_type',
            field=models.CharField(
                choices=[('equal', 'Equal'), ('percentage', 'Percentage'), ('amount', 'Amount')],
                default='equal',
                max_length=20,
            ),
        ),
    ]
