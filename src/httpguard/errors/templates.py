"""
HTML templates for HtmlRenderer.

Placeholders use string.Template syntax. Every value substituted into
these templates must already be HTML-escaped by the caller.

    ERROR_PAGE           generic page, no internals (production)
    EXCEPTION_PAGE       full page with exception details (debug)
    CALL_STACK_ITEM      one frame of the traceback
    PREVIOUS_EXCEPTION   one entry of the __cause__/__context__ chain
"""

from string import Template


_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           max-width: 960px; margin: 40px auto; padding: 0 20px; color: #333; }
    h1 { color: #c0392b; margin-bottom: 8px; }
    .message { font-size: 1.2em; margin-bottom: 24px; }
    .location { color: #777; margin-bottom: 24px; }
    ol.call-stack { padding-left: 24px; }
    ol.call-stack li { margin-bottom: 8px; }
    code, pre { font-family: SFMono-Regular, Consolas, monospace; background: #f6f8fa; }
    pre { padding: 8px; overflow-x: auto; }
    .previous { border-left: 4px solid #e67e22; padding-left: 12px; margin-top: 24px; }
"""


ERROR_PAGE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>$title</title>
    <style>""" + _STYLE + """</style>
</head>
<body>
    <h1>$title</h1>
    <p class="message">$message</p>
</body>
</html>
""")


EXCEPTION_PAGE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>$type</title>
    <style>""" + _STYLE + """</style>
</head>
<body>
    <h1>$type</h1>
    <p class="message">$message</p>
    <p class="location">in <code>$file</code> at line <code>$line</code></p>
    <h2>Call stack</h2>
    <ol class="call-stack">
$call_stack
    </ol>
$previous
</body>
</html>
""")


CALL_STACK_ITEM = Template("""        <li>
            <code>$file</code>:<code>$line</code> in <code>$function</code>
            <pre>$code</pre>
        </li>""")


PREVIOUS_EXCEPTION = Template("""    <div class="previous">
        <h3>Caused by: $type</h3>
        <p class="message">$message</p>
        <p class="location">in <code>$file</code> at line <code>$line</code></p>
    </div>""")
