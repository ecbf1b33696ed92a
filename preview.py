"""
Preview formatting for ClipTrail
Renders a bounded rectangle of an entry's content for the terminal
"""

ELLIPSIS = '(...)'


def _split_lines(text):
    lines = text.split('\n')
    # a trailing newline terminates the last line, it does not start a new one
    if len(lines) > 1 and lines[-1] == '':
        lines.pop()
    return lines


def format_preview(content, max_width=None, max_lines=None, ellipsis=True):
    """
    Format content for display

    Args:
        content: Raw entry bytes or already-decoded text
        max_width: Maximum characters per line, None for no limit
        max_lines: Maximum number of lines, None for no limit
        ellipsis: Append a "(...)" line when lines were cut off

    Returns:
        The formatted text
    """
    if max_lines == 0:
        return ''

    if isinstance(content, bytes):
        content = content.decode('utf-8', errors='replace')

    lines = _split_lines(content)
    shown = lines if max_lines is None else lines[:max_lines]

    if max_width is not None:
        shown = [line[:max_width] for line in shown]

    out = '\n'.join(shown)
    if ellipsis and len(shown) < len(lines):
        out += '\n' + ELLIPSIS
    return out
