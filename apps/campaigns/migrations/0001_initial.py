import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Campaign',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('time', models.CharField(help_text='Time window, e.g. 09:00-17:00.', max_length=20)),
                ('name', models.CharField(max_length=200)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('slots_available', models.PositiveIntegerField(default=0)),
                ('number_adverts', models.PositiveIntegerField(default=0, help_text='Adverts carried by each slot.')),
                ('price', models.DecimalField(decimal_places=2, help_text='Price per slot in GBP.', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('availability', models.CharField(choices=[('available', 'Available'), ('limited', 'Limited'), ('full', 'Full')], default='available', max_length=20)),
                ('icon_url', models.URLField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Campaign',
                'verbose_name_plural': 'Campaigns',
                'ordering': ['date', 'time', 'id'],
                'indexes': [
                    models.Index(fields=['date', 'location'], name='campaign_date_location_idx'),
                    models.Index(fields=['availability'], name='campaign_availability_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('slots_available__gte', 0)), name='campaign_slots_non_negative'),
                ],
            },
        ),
    ]
