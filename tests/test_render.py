from render import render_message, render_line


def test_escapes_reserved_characters():
    out = render_message('<b>"fish" & \'chips\'</b>')
    assert '<b>' not in out
    assert '&lt;b&gt;' in out
    assert '&amp;' in out
    assert '&#34;fish&#34;' in out
    assert '&#39;chips&#39;' in out


def test_quote_reference_becomes_link():
    out = render_line('>>42 nice')
    assert '<a class="quotelink" href="#42">&gt;&gt;42</a>' in out
    assert out.endswith(' nice</span>')


def test_every_reference_on_a_line_is_linked():
    out = render_line('see >>1 and >>22')
    assert out == ('see <a class="quotelink" href="#1">&gt;&gt;1</a>'
                   ' and <a class="quotelink" href="#22">&gt;&gt;22</a>')


def test_greentext_only_at_line_start():
    assert render_line('>hello') == '<span class="quote">&gt;hello</span>'
    assert render_line('a > b') == 'a &gt; b'
    assert render_line(' >indented') == ' &gt;indented'


def test_reference_without_digits_is_left_alone():
    assert render_line('x >>abc') == 'x &gt;&gt;abc'


def test_lines_joined_with_breaks():
    out = render_message('one\n>two\n\nthree')
    assert str(out) == 'one<br>\n<span class="quote">&gt;two</span><br>\n<br>\nthree'


def test_rendering_is_pure():
    message = '>>5\n>quote\n<script>alert(1)</script>'
    assert render_message(message) == render_message(message)


def test_output_is_markup():
    assert hasattr(render_message('hi'), '__html__')


def test_only_newlines_break_lines():
    out = render_message('a\x0c>b\u2028>c')
    assert '<br>' not in out
    assert '<span class="quote">' not in out


def test_carriage_returns_are_dropped():
    assert str(render_message('one\r\n>two\r\n')) == 'one<br>\n<span class="quote">&gt;two</span>'
