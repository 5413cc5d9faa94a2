from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, help_text='List price', max_digits=10)),
                ('discount_price', models.DecimalField(blank=True, decimal_places=2, help_text='Discount price, charged instead of the list price when set', max_digits=10, null=True)),
                ('description', models.TextField(blank=True, default='')),
                ('status', models.IntegerField(choices=[(1, 'Active'), (-1, 'Inactive')], default=1, help_text='1=active, -1=inactive')),
                ('inventory', models.PositiveIntegerField(default=0, help_text='Stock quantity')),
                ('sold', models.PositiveIntegerField(default=0, help_text='Sold quantity')),
                ('low_stock_threshold', models.PositiveIntegerField(default=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'indexes': [
                    models.Index(fields=['status'], name='products_status_idx'),
                    models.Index(fields=['created_at'], name='products_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('price__gte', 0)), name='product_price_non_negative'),
                ],
            },
        ),
    ]
