import os
import logging
from typing import Any, Dict, List, Tuple
from flask import current_app
from werkzeug.utils import secure_filename

from qbank.utils.document_reader import DocumentReader
from qbank.utils.mcq_parser import parse_mcq_questions
from qbank.utils.cq_parser import parse_cq_questions
from qbank.utils.sq_parser import parse_sq_questions
from qbank.utils.math_parser import parse_math_questions
from qbank.utils.validators import QuestionValidator

logger = logging.getLogger(__name__)

PARSERS = {
    'mcq': parse_mcq_questions,
    'cq': parse_cq_questions,
    'sq': parse_sq_questions,
    'math': parse_math_questions,
}

NO_QUESTIONS_MESSAGE = 'No questions could be parsed. Please check your format.'


class ImportSourceError(ValueError):
    """Raised when the request carries no usable text or file"""


class QuestionImporter:
    """Turns pasted text or an uploaded document into validated question records."""

    def __init__(self):
        self.reader = DocumentReader()
        self.max_file_size = current_app.config.get('MAX_UPLOAD_SIZE', 10 * 1024 * 1024)
        self.allowed_extensions = set(current_app.config.get(
            'ALLOWED_UPLOAD_EXTENSIONS', self.reader.supported_formats
        ))
        self.default_language = current_app.config.get('DEFAULT_LANGUAGE', 'en')
        self.languages = current_app.config.get('SUPPORTED_LANGUAGES', ['en', 'bn'])

    def read_source(self, request) -> Tuple[str, str]:
        """
        Pull the import text and language from a request.

        A multipart ``file`` wins over a JSON ``text`` field.

        Returns:
            (text, language)
        """
        upload = request.files.get('file') if request.files else None
        if upload is not None:
            language = request.form.get('language') or self.default_language
            return self._read_file(upload), self._check_language(language)

        data = request.get_json(silent=True) or {}
        text = data.get('text')
        if not isinstance(text, str) or not text.strip():
            raise ImportSourceError('Provide question text or upload a file')
        language = data.get('language') or self.default_language
        return text, self._check_language(language)

    def _check_language(self, language: str) -> str:
        if language not in self.languages:
            raise ImportSourceError(f"Unsupported language: {language}. Supported: {', '.join(self.languages)}")
        return language

    def _read_file(self, upload) -> str:
        if not upload.filename:
            raise ImportSourceError('No filename provided')

        filename = secure_filename(upload.filename)
        file_ext = os.path.splitext(filename.lower())[1]
        if file_ext not in self.allowed_extensions:
            raise ImportSourceError(
                f"Unsupported file type: {file_ext}. Supported: {', '.join(sorted(self.allowed_extensions))}"
            )

        content = upload.read()
        if len(content) > self.max_file_size:
            raise ImportSourceError(f'File too large. Maximum size: {self.max_file_size // (1024 * 1024)}MB')

        logger.info(f"Reading uploaded file {filename} ({len(content)} bytes)")
        return self.reader.read_text(content, filename)

    def parse(self, kind: str, text: str, language: str) -> Dict[str, Any]:
        """Run the parser for ``kind`` and attach a validation summary."""
        parser = PARSERS.get(kind)
        if parser is None:
            raise ImportSourceError(f"Unsupported question kind: {kind}. Supported: {', '.join(PARSERS)}")

        questions: List[Dict[str, Any]] = [record.to_dict() for record in parser(text, language)]
        report = QuestionValidator.validate_batch(questions)

        logger.info(
            f"Parsed {len(questions)} {kind} question(s), "
            f"{len(report['valid'])} valid, {len(report['invalid'])} invalid"
        )
        return {
            'success': True,
            'kind': kind,
            'count': len(questions),
            'questions': questions,
            'validation': {
                'valid_count': len(report['valid']),
                'invalid': [
                    {'index': entry['index'], 'errors': entry['errors']}
                    for entry in report['invalid']
                ]
            }
        }
