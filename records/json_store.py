"""JSON Store - Arquivo JSON lido e gravado por inteiro a cada operacao."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from core.exceptions import RecordStoreError
from core.logger import get_logger

logger = get_logger("records.json_store")


class JsonRecordFile:
    """Lista de registros persistida em um arquivo JSON.

    Leituras tolerantes (arquivo ausente ou corrompido -> lista vazia) e
    leituras estritas (corrompido -> RecordStoreError), usadas antes de
    gravar para nao sobrescrever dados ilegiveis.

    Example:
        >>> students = JsonRecordFile(Path("data/students.json"))
        >>> records = students.read()
        >>> students.write(records + [new_record])
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self, strict: bool = False) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as e:
            if strict:
                raise RecordStoreError(
                    f"Arquivo ilegivel: {self.path.name}",
                    details={"path": str(self.path), "error": str(e)},
                ) from e
            logger.error(f"Erro ao ler {self.path.name}: {e}")
            return []

        if not isinstance(data, list):
            if strict:
                raise RecordStoreError(
                    f"Conteudo invalido em {self.path.name} (esperado lista)",
                    details={"path": str(self.path)},
                )
            logger.error(f"Conteudo invalido em {self.path.name} (esperado lista)")
            return []
        return data

    def write(self, records: list[dict[str, Any]]) -> None:
        """Grava atomicamente (arquivo temporario + os.replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise RecordStoreError(
                f"Falha ao gravar {self.path.name}",
                details={"path": str(self.path), "error": str(e)},
            ) from e
        logger.debug(f"{self.path.name}: {len(records)} registros gravados")
