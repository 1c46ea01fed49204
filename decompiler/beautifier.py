"""
Reformatting of minified JavaScript and CSS
"""
import re
import logging

import jsbeautifier

logger = logging.getLogger(__name__)


class BeautifyError(Exception):
    """Raised when the JS formatter cannot handle its input"""


def js_options():
    """Formatter options: 2-space indent, collapsed braces, trailing newline"""
    opts = jsbeautifier.default_options()
    opts.indent_size = 2
    opts.indent_char = ' '
    opts.preserve_newlines = True
    opts.max_preserve_newlines = 2
    opts.keep_array_indentation = False
    opts.break_chained_methods = False
    opts.space_before_conditional = True
    opts.brace_style = 'collapse'
    opts.end_with_newline = True
    return opts


def beautify_js(content: str) -> str:
    """Beautify JavaScript, raising BeautifyError on formatter failure"""
    try:
        return jsbeautifier.beautify(content, js_options())
    except Exception as e:
        raise BeautifyError(str(e)) from e


def beautify_css(content: str) -> str:
    """
    Textual CSS layout. Not syntax aware: strings and URLs containing
    braces, semicolons or commas get split too.
    """
    css = content.replace('{', ' {\n  ')
    css = css.replace('}', '\n}\n')
    css = css.replace(';', ';\n  ')
    css = css.replace(',', ',\n  ')
    css = re.sub(r'\n\s*\n', '\n', css)
    return css.strip()
