import logging
from typing import Tuple, Optional
from pydantic import BaseModel, ValidationError
from app.schemas.add_keyword_schema import KeywordSchema, RuleTextSchema, ButtonTitleSchema, ButtonCountSchema

logger = logging.getLogger(__name__)


class AddKeywordValidators:
    """
    Responsabilidad única: Validaciones específicas del flujo de agregar keyword.
    Encapsula toda la lógica de validación usando Pydantic schemas.
    """

    @staticmethod
    def _validate(schema: type, field: str, value) -> Tuple[bool, str, Optional[object]]:
        """
        Valida un único campo con el schema indicado.

        Returns:
            Tuple[bool, str, Optional[object]]: (is_valid, error_message, cleaned_value)
        """
        try:
            model: BaseModel = schema(**{field: value})
            cleaned = getattr(model, field)
            logger.debug(f"{schema.__name__} validado exitosamente: {cleaned}")
            return (True, "", cleaned)
        except ValidationError as e:
            error_msg = e.errors()[0]['msg']
            logger.warning(f"{schema.__name__} inválido '{value}': {error_msg}")
            return (False, error_msg, None)

    @staticmethod
    def validate_keyword(keyword: str) -> Tuple[bool, str, Optional[str]]:
        """Valida el nombre de la keyword; la devuelve normalizada en mayúsculas."""
        return AddKeywordValidators._validate(KeywordSchema, "keyword", keyword)

    @staticmethod
    def validate_rule_text(text: str) -> Tuple[bool, str, Optional[str]]:
        return AddKeywordValidators._validate(RuleTextSchema, "text", text)

    @staticmethod
    def validate_button_title(title: str) -> Tuple[bool, str, Optional[str]]:
        return AddKeywordValidators._validate(ButtonTitleSchema, "title", title)

    @staticmethod
    def validate_button_count(count) -> Tuple[bool, str, Optional[int]]:
        """Acepta el número como int o como texto escrito por el usuario ("2")."""
        return AddKeywordValidators._validate(ButtonCountSchema, "count", count)
