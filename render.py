from markupsafe import Markup, escape

import re

# markupsafe escape: Replace the special characters &, <, >, ' and " with HTML-safe sequences.
# the regex is searching the post after it was escaped,
# so it has to be written with the html sequences in it.
f_ref = re.compile(str(escape('>>')) + r'(\d+)')   # >>123123

# what they turn into
quotelink = '<a class="quotelink" href="#{pid}">&gt;&gt;{pid}</a>'
implying = '<span class="quote">{}</span>'


def _r_ref(match):
    return quotelink.format(pid=match.group(1))


def render_line(line):
    """ escapes a single line, then links every >>pid in it.
    The greentext test is done on the raw line; escaping never changes
    whether a line starts with >, only what it looks like.
    """
    body = re.sub(f_ref, _r_ref, str(escape(line)))
    if line.startswith('>'):
        body = implying.format(body)
    return body


def render_message(message):
    """ injects our html formatters into a post body
        Args:
            message (str): the raw body of the post, newlines and all
        Returns:
            Markup: the body with quote links and greentext; HTML-safe
    """
    # only \n breaks a line; a trailing newline does not start another one
    lines = [l.rstrip('\r') for l in message.split('\n')]
    if len(lines) > 1 and lines[-1] == '':
        lines.pop()
    return Markup('<br>\n'.join(render_line(l) for l in lines))
