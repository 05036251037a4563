import copy
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ContentStore:
    """
    Responsabilidad única: catálogo de respuestas por keyword.

    - Reglas integradas: `script.json` (KEYWORD -> archivo en `script/`), de solo lectura.
    - Reglas personalizadas: un `<KEYWORD>.json` por regla en el directorio de reglas
      personalizadas; se agregan en tiempo de ejecución y se recargan al arrancar.

    Las plantillas se leen una sola vez; las búsquedas no tocan disco.
    """

    INDEX_FILE = "script.json"
    TEMPLATES_DIR = "script"
    EMOJI_FILE = "emoji.json"

    def __init__(self, content_dir: Path, custom_dir: Path):
        self.content_dir = Path(content_dir)
        self.custom_dir = Path(custom_dir)
        self._templates: Dict[str, Dict] = {}
        self._builtin: Dict[str, str] = {}
        self._custom: Dict[str, Dict] = {}
        self.emoji: List[str] = []

    @classmethod
    def load(cls, content_dir: Path, custom_dir: Path) -> "ContentStore":
        """Crea el catálogo leyendo el contenido estático y las reglas ya persistidas."""
        store = cls(content_dir, custom_dir)
        store._load_templates()
        store._load_index()
        store._load_emoji()
        store._load_custom_rules()
        logger.info(
            f"[CONTENT] {len(store._builtin)} keywords integradas, "
            f"{len(store._custom)} personalizadas, {len(store.emoji)} emojis"
        )
        return store

    @staticmethod
    def normalize(keyword: str) -> str:
        return keyword.strip().upper()

    # ==================== CARGA ====================

    def _load_templates(self):
        for path in sorted((self.content_dir / self.TEMPLATES_DIR).glob("*.json")):
            template = self._read_json(path)
            if isinstance(template, dict):
                self._templates[path.name] = template

    def _load_index(self):
        index = self._read_json(self.content_dir / self.INDEX_FILE) or {}
        for keyword, filename in index.items():
            if filename not in self._templates:
                logger.warning(f"[CONTENT] Keyword {keyword} apunta a {filename}, que no existe")
                continue
            self._builtin[self.normalize(keyword)] = filename

    def _load_emoji(self):
        self.emoji = list(self._read_json(self.content_dir / self.EMOJI_FILE) or [])

    def _load_custom_rules(self):
        self.custom_dir.mkdir(parents=True, exist_ok=True)
        for path in sorted(self.custom_dir.glob("*.json")):
            template = self._read_json(path)
            if isinstance(template, dict):
                self._custom[self.normalize(path.stem)] = template

    @staticmethod
    def _read_json(path: Path):
        try:
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            logger.warning(f"[CONTENT] No existe {path}")
        except (OSError, ValueError) as e:
            logger.error(f"[CONTENT] No se pudo leer {path}: {e}")
        return None

    # ==================== CONSULTAS ====================

    def template(self, filename: str) -> Optional[Dict]:
        """Devuelve una copia de una plantilla del directorio `script/` por nombre de archivo."""
        template = self._templates.get(filename)
        return copy.deepcopy(template) if template is not None else None

    def has_builtin(self, keyword: str) -> bool:
        return self.normalize(keyword) in self._builtin

    def get_builtin(self, keyword: str) -> Optional[Dict]:
        filename = self._builtin.get(self.normalize(keyword))
        return self.template(filename) if filename else None

    def has_custom(self, keyword: str) -> bool:
        return self.normalize(keyword) in self._custom

    def get_custom(self, keyword: str) -> Optional[Dict]:
        template = self._custom.get(self.normalize(keyword))
        return copy.deepcopy(template) if template is not None else None

    def custom_keywords(self) -> List[str]:
        return list(self._custom)

    # ==================== ESCRITURA ====================

    def add_custom_rule(self, keyword: str, text: str) -> Path:
        """
        Persiste una regla de texto y la registra en el catálogo.

        La escritura no es atómica; la regla solo se registra si el archivo se escribió.

        Raises:
            OSError: Si no se pudo escribir el archivo
        """
        keyword = self.normalize(keyword)
        template = {"text": text}
        path = self.custom_dir / f"{keyword}.json"

        path.write_text(json.dumps(template, ensure_ascii=False), encoding="utf-8")
        self._custom[keyword] = template

        logger.info(f"[CONTENT] Regla personalizada guardada: {keyword} -> {path}")
        return path
