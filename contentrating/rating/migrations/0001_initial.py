from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='RatingTypeSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('node_type', models.CharField(help_text='Machine name of the content type', max_length=32, unique=True)),
                ('enabled', models.BooleanField(default=False, help_text='Whether content of this type can be rated')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Rating type setting',
                'verbose_name_plural': 'Rating type settings',
                'db_table': 'rating_type_settings',
                'ordering': ['node_type'],
            },
        ),
        migrations.CreateModel(
            name='RatingRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nid', models.PositiveIntegerField(db_index=True, help_text='The content item being rated')),
                ('vid', models.PositiveIntegerField(help_text='The revision the rating belongs to', unique=True)),
                ('rating', models.PositiveSmallIntegerField(choices=[(0, 'Unrated'), (1, 'Poor'), (2, 'Needs improvement'), (3, 'Acceptable'), (4, 'Good'), (5, 'Excellent')], default=0)),
            ],
            options={
                'verbose_name': 'Rating',
                'verbose_name_plural': 'Ratings',
                'db_table': 'ratings',
                'ordering': ['nid', 'vid'],
                'constraints': [models.CheckConstraint(condition=models.Q(('rating__lte', 5)), name='rating_value_range')],
            },
        ),
    ]
