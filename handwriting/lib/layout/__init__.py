from .models import *
from .tokenizer import tokenize, classify, SYMBOLS
from .markdown import remove_markdown
from .jitter import JitterGenerator
from .line_builder import build_line, build_lines, INDENT
from .paginator import Paginator, FontMetrics, flow_dividers
from .facade import LayoutEngine, FontStatusProvider, EXPORT_PAGE, PREVIEW_PAGE, MAX_INPUT_CHARS
