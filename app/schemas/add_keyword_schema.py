from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
import re

KEYWORD_PATTERN = re.compile(r'^[^\W_]+(?: [^\W_]+)*$')


class KeywordSchema(BaseModel):
    """Schema para validar el nombre de una keyword nueva"""
    keyword: str = Field(..., min_length=1)

    @field_validator('keyword')
    def validate_keyword(cls, v):
        v = ' '.join(v.split())
        if not v or len(v) > 30 or not KEYWORD_PATTERN.match(v):
            raise PydanticCustomError(
                'keyword_invalid',
                'La keyword solo puede contener letras, números y espacios, con máximo 30 caracteres'
            )
        return v.upper()


class RuleTextSchema(BaseModel):
    """Schema para validar el texto de respuesta de una regla"""
    text: str = Field(..., min_length=1)

    @field_validator('text')
    def validate_text(cls, v):
        v = v.strip()
        if not v or len(v) > 2000:
            raise PydanticCustomError(
                'text_invalid',
                'El texto de respuesta no puede estar vacío ni superar 2000 caracteres'
            )
        return v


class ButtonTitleSchema(BaseModel):
    """Schema para validar el título de un botón"""
    title: str = Field(..., min_length=1)

    @field_validator('title')
    def validate_title(cls, v):
        v = v.strip()
        if not v or len(v) > 20:
            raise PydanticCustomError(
                'button_title_invalid',
                'El título del botón debe tener entre 1 y 20 caracteres'
            )
        return v


class ButtonCountSchema(BaseModel):
    """Schema para validar cuántos botones adicionales se agregan"""
    count: int

    @field_validator('count')
    def validate_count(cls, v):
        if v < 1 or v > 3:
            raise PydanticCustomError(
                'button_count_invalid',
                'Puedes agregar entre 1 y 3 botones'
            )
        return v
