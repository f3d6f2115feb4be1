from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LinkTarget',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                (
                    'link_type',
                    models.CharField(
                        choices=[
                            ('tarot', 'Tarot'),
                            ('blog', 'Blog'),
                            ('spread', 'Spread'),
                            ('horoscope', 'Horoscope'),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ('slug', models.SlugField(max_length=255)),
                ('title', models.CharField(max_length=300)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['link_type', 'title'],
                'unique_together': {('link_type', 'slug')},
            },
        ),
    ]
