# apps/core/management/commands/seed_users.py

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from apps.core.models import User


class Command(BaseCommand):
    help = 'Cria o usuário administrador padrão do board (idempotente)'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='admin')
        parser.add_argument('--email', default='admin@example.com')
        parser.add_argument('--password', default='password123')

    def handle(self, *args, **options):
        username = options['username']

        self.stdout.write('🌱 Criando usuário padrão...')

        try:
            if User.objects.filter(username=username).exists():
                self.stdout.write(self.style.WARNING(f'  ⚠️  Usuário {username} já existe - nada a fazer'))
                return

            User.objects.create_superuser(
                username=username,
                email=options['email'],
                password=options['password'],
                name='Admin User',
                role='admin',
                skills=['JavaScript', 'React', 'Node.js'],
                workload_capacity=40,
            )
        except DatabaseError as e:
            raise CommandError(f'❌ Erro ao criar usuário: {e}')

        self.stdout.write(
            self.style.SUCCESS(
                f'\n✅ Usuário {username} criado!\n'
                f'  • Email: {options["email"]}\n'
                f'  • Papel: admin\n'
                '\nAltere a senha padrão antes de usar em produção.\n'
            )
        )
