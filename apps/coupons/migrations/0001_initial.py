import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Coupon',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Stored upper-cased', max_length=50, unique=True)),
                ('description', models.CharField(blank=True, default='', max_length=255)),
                ('discount_percentage', models.DecimalField(blank=True, decimal_places=2, help_text='Percentage off the subtotal (0-100]', max_digits=5, null=True)),
                ('discount_amount', models.DecimalField(blank=True, decimal_places=2, help_text='Flat amount off the subtotal', max_digits=10, null=True)),
                ('max_discount_amount', models.DecimalField(blank=True, decimal_places=2, help_text='Cap applied to percentage discounts', max_digits=10, null=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('min_purchase_amount', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('usage_limit', models.PositiveIntegerField(blank=True, help_text='Empty means unlimited', null=True)),
                ('used_count', models.PositiveIntegerField(default=0, help_text='Only grows, through redemption')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_coupons', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'coupons',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['is_active', 'expiry_date'], name='coupons_active_expiry_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('discount_percentage__isnull', False), ('discount_amount__isnull', True)),
                            models.Q(('discount_percentage__isnull', True), ('discount_amount__isnull', False)),
                            _connector='OR',
                        ),
                        name='coupon_single_discount_mode',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ('discount_percentage__isnull', True),
                            models.Q(('discount_percentage__gt', 0), ('discount_percentage__lte', 100)),
                            _connector='OR',
                        ),
                        name='coupon_percentage_range',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ('usage_limit__isnull', True),
                            ('used_count__lte', models.F('usage_limit')),
                            _connector='OR',
                        ),
                        name='coupon_used_within_limit',
                    ),
                ],
            },
        ),
    ]
