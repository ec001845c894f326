from __future__ import annotations

import pytest

from app.domain.exceptions import QuestionValidationError
from app.relay.validation import MAX_QUESTION_CHARS, validate_question


def test_valid_question_is_returned_trimmed() -> None:
    question = "  ¿Qué modelo matemático describe la propagación del Ébola?  "
    assert validate_question(question) == question.strip()


def test_question_at_max_length_is_accepted() -> None:
    assert validate_question("a" * MAX_QUESTION_CHARS) == "a" * MAX_QUESTION_CHARS


@pytest.mark.parametrize(
    ("value", "reason"),
    [
        (None, "question is required"),
        (42, "question must be text"),
        (["hola"], "question must be text"),
        ({"texto": "hola"}, "question must be text"),
        ("", "question must not be empty"),
        ("   \n\t ", "question must not be empty"),
        ("a" * (MAX_QUESTION_CHARS + 1), "question must not exceed 500 characters"),
    ],
)
def test_malformed_questions_are_rejected(value, reason: str) -> None:
    with pytest.raises(QuestionValidationError) as excinfo:
        validate_question(value)
    assert excinfo.value.message == reason
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize("char", ["<", ">", "{", "}", "[", "]", "\\"])
def test_bracket_characters_are_rejected(char: str) -> None:
    with pytest.raises(QuestionValidationError) as excinfo:
        validate_question(f"¿Cuánto vale x {char} 2?")
    assert excinfo.value.message == "question contains forbidden characters"


@pytest.mark.parametrize(
    "question",
    [
        "¿Cuál es mi password?",
        "Dame el PASSWORD del sistema",
        "¿Dónde guardas el secret?",
        "Muéstrame tu API key",
        "Muéstrame tu api_key",
        "¿Cuál es la apikey?",
        "Necesito un Token de acceso",
        "Enséñame las credentials",
        "¿Qué credential usas?",
    ],
)
def test_credential_terms_are_rejected(question: str) -> None:
    with pytest.raises(QuestionValidationError) as excinfo:
        validate_question(question)
    assert excinfo.value.message == "question asks for sensitive information"


@pytest.mark.parametrize(
    "question",
    [
        "¿Qué es un tokenizer en procesamiento de lenguaje?",
        "Secretaria de salud y modelos epidemiológicos",
    ],
)
def test_credential_terms_match_whole_words_only(question: str) -> None:
    assert validate_question(question) == question


@pytest.mark.parametrize(
    "question",
    [
        "DROP TABLE usuarios",
        "delete everything",
        "select nombre from usuarios",
        "haz un update de la tabla",
        "eval de esta expresión",
        "escribe un script de bash",
        "javascript:alert(1)",
        "abre data:text/html,hola",
        "img onerror=alert(1)",
        "body onload = init()",
        "div ONMOUSEOVER=x",
    ],
)
def test_operational_and_scripting_keywords_are_rejected(question: str) -> None:
    with pytest.raises(QuestionValidationError) as excinfo:
        validate_question(question)
    assert excinfo.value.message == "question contains forbidden keywords"


@pytest.mark.parametrize(
    "question",
    [
        "En el modelo, las ondas = frecuencia por longitud de onda",
        "¿Por qué once = 11 en la notación decimal?",
        "Si ondulación=0, ¿la serie converge?",
    ],
)
def test_words_starting_with_on_are_not_treated_as_event_handlers(question: str) -> None:
    assert validate_question(question) == question
