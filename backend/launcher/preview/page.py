"""
HTML-страница превью: содержимое index.html во <iframe sandbox="allow-scripts" srcdoc=...>.

Без allow-same-origin превью не может читать или скриптовать страницу-хост,
а относительные пути к ресурсам внутри него не резолвятся.
Высоту документ сообщает через postMessage; хост пересылает её в POST /preview/height.
"""

from jinja2 import Environment, select_autoescape

HEIGHT_REPORTER = """
<script>
(function () {
  var revision = %d;
  function report() {
    var body = document.body;
    if (!body) return;
    parent.postMessage({type: "launcher:height", revision: revision, height: body.scrollHeight}, "*");
  }
  window.addEventListener("load", report);
  if (window.ResizeObserver && document.body) {
    new ResizeObserver(report).observe(document.body);
  }
  report();
})();
</script>
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 24px; }
        iframe { width: 100%; min-height: {{ min_height }}px; border: 1px solid #ccc; border-radius: 6px; }
        .note { color: #666; font-size: 12px; }
    </style>
</head>
<body>
    <h4>Preview (index.html):</h4>
    <iframe id="preview" title="Local Content Preview" sandbox="allow-scripts"
            style="height: {{ height }}px" srcdoc="{{ document }}"></iframe>
    <p class="note">
        Note: This preview renders the HTML content of 'index.html'. Relative paths to assets
        (CSS, JS, images) within the HTML may not load correctly in this sandboxed preview.
        For full functionality, use a command-line HTTP server.
    </p>
    <script>
    (function () {
        var frame = document.getElementById("preview");
        window.addEventListener("message", function (event) {
            var data = event.data || {};
            if (event.source !== frame.contentWindow || data.type !== "launcher:height") return;
            frame.style.height = Math.max({{ min_height }}, data.height) + "px";
            fetch("{{ height_endpoint }}", {
                method: "POST",
                headers: {"Content-Type": "application/json"},
                body: JSON.stringify({revision: data.revision, height: data.height})
            });
        });
    })();
    </script>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_template = _env.from_string(PAGE_TEMPLATE)


def embed_height_reporter(content: str, revision: int) -> str:
    return content + HEIGHT_REPORTER % revision


def render_preview_page(
    content: str,
    revision: int,
    height: int,
    min_height: int,
    height_endpoint: str = "/preview/height",
) -> str:
    return _template.render(
        title="Local Content Preview",
        document=embed_height_reporter(content, revision),
        height=height,
        min_height=min_height,
        height_endpoint=height_endpoint,
    )
