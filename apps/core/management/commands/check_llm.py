# apps/core/management/commands/check_llm.py

from django.apps import apps
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError, connection

from apps.core.exceptions import UpstreamServiceError


class Command(BaseCommand):
    help = 'Verifica o banco de dados e a conexão com o servidor de LLM'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Testa o LLM mesmo com ENABLE_AI desligado'
        )

    def handle(self, *args, **options):
        self.stdout.write('🔍 Verificando dependências do sistema...')

        self._testar_conectividade_banco()

        if not settings.ENABLE_AI and not options['force']:
            self.stdout.write(self.style.WARNING(
                '  ⏭️  ENABLE_AI desligado - teste do LLM ignorado (use --force para testar)'
            ))
            return

        self._testar_llm()

        self.stdout.write(self.style.SUCCESS('\n✅ SISTEMA VERIFICADO E FUNCIONANDO!'))

    def _testar_conectividade_banco(self):
        """Testa conectividade básica"""
        self.stdout.write('  🔗 Testando conectividade do banco...')

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                result = cursor.fetchone()
        except DatabaseError as e:
            raise CommandError(f'❌ Banco inacessível: {e}')

        if result[0] != 1:
            raise CommandError('❌ Banco não está respondendo corretamente')

        self.stdout.write('    ✅ Banco de dados conectado')

    def _testar_llm(self):
        """Envia um prompt curto ao servidor de LLM configurado"""
        client = apps.get_app_config('ai').completion_client

        self.stdout.write(f'  🤖 Testando LLM em {client.base_url} (modelo {client.model})...')

        try:
            reply = client.ping()
        except UpstreamServiceError as e:
            raise CommandError(
                f'❌ {e.message}: {e.detail}\n'
                '💡 O LM Studio está rodando? Confira a URL em /api/settings/llm-url/'
            )

        self.stdout.write(f'    ✅ Resposta recebida: {reply.strip()[:80]}')
