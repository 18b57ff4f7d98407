# Seed the default subjects and UI texts the front-end expects on a fresh install

from django.db import migrations

from quizbank.sysutils.constants import DEFAULT_APP_TEXTS, DEFAULT_SUBJECTS


def seed(apps, schema_editor):
    Subject = apps.get_model('content', 'Subject')
    AppText = apps.get_model('content', 'AppText')
    for row in DEFAULT_SUBJECTS:
        Subject.objects.get_or_create(id=row['id'], defaults={k: v for k, v in row.items() if k != 'id'})
    for key, value, description in DEFAULT_APP_TEXTS:
        AppText.objects.get_or_create(key=key, defaults={'value': value, 'description': description})


def unseed(apps, schema_editor):
    Subject = apps.get_model('content', 'Subject')
    AppText = apps.get_model('content', 'AppText')
    Subject.objects.filter(id__in=[row['id'] for row in DEFAULT_SUBJECTS], lessons__isnull=True).delete()
    AppText.objects.filter(key__in=[key for key, _, _ in DEFAULT_APP_TEXTS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('content', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
