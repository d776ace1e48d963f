# apps/board/uploads.py

import logging
import os
import re

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone

from apps.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _is_allowed(uploaded_file):
    """
    Aceita o arquivo se a extensão OU o mimetype estiver na lista permitida
    """
    allowed = settings.KANBAN_UPLOAD_ALLOWED_EXTENSIONS
    extension = os.path.splitext(uploaded_file.name)[1].lower().lstrip('.')
    if extension in allowed:
        return True

    mimetype = (uploaded_file.content_type or '').lower()
    return any(kind in mimetype for kind in allowed)


def store_uploads(files):
    """
    Valida e grava os anexos enviados, retornando os descritores
    que ficam em Task.file_attachments
    """
    files = list(files or [])
    if not files:
        return []

    if len(files) > settings.KANBAN_UPLOAD_MAX_FILES:
        raise ValidationError(f'At most {settings.KANBAN_UPLOAD_MAX_FILES} files can be attached at once')

    for uploaded_file in files:
        if uploaded_file.size > settings.KANBAN_UPLOAD_MAX_SIZE:
            raise ValidationError(f'File {uploaded_file.name} exceeds the upload size limit')
        if not _is_allowed(uploaded_file):
            raise ValidationError(f'File type not supported: {uploaded_file.name}')

    descriptors = []
    for uploaded_file in files:
        # timestamp + nome original sem espaços para evitar conflitos
        stamp = int(timezone.now().timestamp() * 1000)
        clean_name = re.sub(r'\s+', '-', os.path.basename(uploaded_file.name))
        path = default_storage.save(f'{settings.KANBAN_UPLOAD_DIR}/{stamp}-{clean_name}', uploaded_file)

        descriptors.append({
            'filename': os.path.basename(path),
            'original_name': uploaded_file.name,
            'path': path,
            'size': uploaded_file.size,
            'mimetype': uploaded_file.content_type,
            'uploaded_at': timezone.now().isoformat(),
        })
        logger.info(f"📎 Anexo salvo: {path} ({uploaded_file.size} bytes)")

    return descriptors


def discard_files(descriptors):
    """Remove do storage os arquivos dos descritores informados"""
    for descriptor in descriptors or []:
        path = descriptor.get('path')
        if not path:
            continue
        try:
            default_storage.delete(path)
            logger.info(f"🗑️  Anexo removido: {path}")
        except OSError as e:
            logger.warning(f"⚠️  Não foi possível remover {path}: {e}")
