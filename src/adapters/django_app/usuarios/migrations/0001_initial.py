"""
Migration inicial para o domínio de Usuários.

Cria a tabela usuarios com e-mail e CPF únicos.
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do usuário'
                )),
                ('nome', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Nome completo'
                )),
                ('email', models.CharField(
                    max_length=254,
                    unique=True,
                    help_text='E-mail normalizado'
                )),
                ('senha', models.CharField(
                    max_length=128,
                    help_text='Hash da senha'
                )),
                ('cpf', models.CharField(
                    max_length=11,
                    unique=True,
                    help_text='CPF sem pontuação'
                )),
                ('telefone', models.CharField(
                    max_length=14,
                    blank=True,
                    default='',
                    help_text='Telefone na forma +55DDNNNNNNNNN'
                )),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('atualizado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'usuarios',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['nome', 'criado_em'], name='usuarios_nome_criado_idx'),
                ],
            },
        ),
    ]
