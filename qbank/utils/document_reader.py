import os
import logging
from io import BytesIO
from typing import List

# Document parsing libraries
import docx
import PyPDF2
import mammoth
from bs4 import BeautifulSoup
import html2text

logger = logging.getLogger(__name__)


class DocumentReader:
    """
    Extracts plain text from uploaded documents so it can be fed to the
    question parsers exactly like pasted text.
    """

    def __init__(self):
        self.supported_formats = ['.txt', '.md', '.docx', '.doc', '.pdf', '.html', '.htm']

    def read_text(self, file_content: bytes, filename: str) -> str:
        """
        Extract text from a document.

        Args:
            file_content: Raw file bytes
            filename: Original filename with extension

        Returns:
            The document text, one paragraph per line
        """
        file_ext = os.path.splitext(filename.lower())[1]

        if file_ext not in self.supported_formats:
            raise ValueError(f"Unsupported file format: {file_ext}")

        try:
            if file_ext in ['.txt', '.md']:
                return self._read_plain(file_content)
            elif file_ext == '.docx':
                return self._read_docx(file_content)
            elif file_ext == '.doc':
                return self._read_doc_with_mammoth(file_content)
            elif file_ext == '.pdf':
                return self._read_pdf(file_content)
            else:
                return self._read_html(file_content)
        except Exception as e:
            logger.error(f"Error reading document {filename}: {str(e)}")
            raise

    def _read_plain(self, file_content: bytes) -> str:
        return file_content.decode('utf-8-sig')

    def _read_docx(self, file_content: bytes) -> str:
        """Body paragraphs first, then the text of every table cell."""
        doc = docx.Document(BytesIO(file_content))

        lines: List[str] = [paragraph.text for paragraph in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    lines.extend(paragraph.text for paragraph in cell.paragraphs)

        return '\n'.join(lines)

    def _read_doc_with_mammoth(self, file_content: bytes) -> str:
        """Convert with mammoth, then flatten the HTML to markdown-ish text."""
        result = mammoth.convert_to_html(BytesIO(file_content))
        for message in result.messages:
            logger.warning(f"mammoth: {message}")

        converter = html2text.HTML2Text()
        converter.body_width = 0
        converter.ignore_images = True
        return converter.handle(result.value)

    def _read_pdf(self, file_content: bytes) -> str:
        reader = PyPDF2.PdfReader(BytesIO(file_content))

        pages = []
        for page in reader.pages:
            pages.append(page.extract_text() or '')

        return '\n'.join(pages)

    def _read_html(self, file_content: bytes) -> str:
        html_content = file_content.decode('utf-8')
        soup = BeautifulSoup(html_content, 'html.parser')

        for br in soup.find_all('br'):
            br.replace_with('\n')

        blocks = soup.find_all(['p', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'div'])
        if not blocks:
            return soup.get_text()

        lines = []
        for block in blocks:
            # Nested blocks are read through their innermost element
            if block.find(['p', 'li', 'div']):
                continue
            lines.append(block.get_text())
        return '\n'.join(lines)
