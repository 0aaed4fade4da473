from __future__ import annotations

import os

from flask import Flask, Response, flash, redirect, render_template_string, request

from bingo_cards.core.errors import RenderError
from bingo_cards.core.generator import generate_cards, number_pool
from bingo_cards.core.layout import layout_from_env
from bingo_cards.core.parser import parse_range, parse_strings_text
from bingo_cards.core.pdf import render_cards_pdf


APP_TITLE = "Bingo-Maschine 4.0"
MAX_CARDS = 1000
MAX_SIZE = 10


HTML = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{ title }}</title>
    <style>
      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 24px; max-width: 920px; }
      h1 { margin: 0 0 8px; }
      .hint { color: #333; margin: 0 0 16px; }
      label { display: block; font-weight: 600; margin: 12px 0 6px; }
      input[type="text"], input[type="number"], textarea { width: 100%; padding: 10px; border: 1px solid #111; border-radius: 6px; }
      textarea { min-height: 200px; font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace; }
      .row { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
      .btn { margin-top: 14px; padding: 10px 14px; border: 2px solid #111; border-radius: 10px; background: #fff; font-weight: 700; cursor: pointer; }
      .box { border: 2px solid #111; border-radius: 12px; padding: 14px; }
      .flash { margin: 10px 0; padding: 10px 12px; border: 1px solid #111; border-radius: 8px; }
      .small { font-size: 12px; color: #333; }
    </style>
  </head>
  <body>
    <h1>{{ title }}</h1>
    <p class="hint">Choose numbers or your own words, set the card size, and download a PDF with four cards per landscape page.</p>

    {% with messages = get_flashed_messages() %}
      {% if messages %}
        {% for msg in messages %}
          <div class="flash">{{ msg }}</div>
        {% endfor %}
      {% endif %}
    {% endwith %}

    <form class="box" method="post" action="/generate" enctype="multipart/form-data">
      <div class="row">
        <div>
          <label>Type of bingo</label>
          <label><input type="radio" name="type" value="numbers" checked> Numbers</label>
          <label><input type="radio" name="type" value="strings"> Strings</label>
        </div>
        <div>
          <label>Card size (columns and rows)</label>
          <input type="number" name="size" value="5" min="1" max="{{ max_size }}" step="1" required>
        </div>
      </div>

      <div class="row">
        <div>
          <label>Range minimum</label>
          <input type="number" name="range_min" value="0">
        </div>
        <div>
          <label>Range maximum</label>
          <input type="number" name="range_max" value="100">
        </div>
      </div>

      <label>Strings (one per line)</label>
      <textarea name="strings"></textarea>

      <div class="row">
        <div>
          <label>Number of cards</label>
          <input type="number" name="count" value="4" min="1" max="{{ max_cards }}" step="1" required>
        </div>
        <div>
          <label>Seed (optional, for reproducible PDFs)</label>
          <input type="number" name="seed" placeholder="e.g. 12345">
        </div>
      </div>

      <label><input type="checkbox" name="ordered" value="1" checked> Ordered values</label>
      <label><input type="checkbox" name="joker" value="1"> Joker in the centre cell (top-left cell on even sizes)</label>
      <label>Joker image (SVG, required with joker)</label>
      <input type="file" name="joker_svg" accept=".svg,image/svg+xml">

      <button class="btn" type="submit">Generate PDF</button>
    </form>

  </body>
</html>
"""


app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


def _form_int(name: str, default: str, label: str) -> int:
    raw = (request.form.get(name) or default).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{label} must be a whole number.") from None


@app.get("/")
def index() -> str:
    return render_template_string(HTML, title=APP_TITLE, max_size=MAX_SIZE, max_cards=MAX_CARDS)


@app.post("/generate")
def generate() -> Response:
    try:
        size = _form_int("size", "5", "Card size")
        count = _form_int("count", "4", "Number of cards")
        seed_raw = (request.form.get("seed") or "").strip()
        seed = _form_int("seed", "", "Seed") if seed_raw else None
    except ValueError as e:
        flash(str(e))
        return redirect("/")

    if not 1 <= size <= MAX_SIZE:
        flash(f"Card size must be between 1 and {MAX_SIZE}.")
        return redirect("/")
    if not 1 <= count <= MAX_CARDS:
        flash(f"Number of cards must be between 1 and {MAX_CARDS}.")
        return redirect("/")

    if request.form.get("type") == "strings":
        pool = parse_strings_text(request.form.get("strings") or "").values
        if not pool:
            flash("Provide at least one string (one per line).")
            return redirect("/")
    else:
        try:
            pool = number_pool(*parse_range(request.form.get("range_min") or "0", request.form.get("range_max") or "100"))
        except ValueError as e:
            flash(str(e))
            return redirect("/")

    joker = bool(request.form.get("joker"))
    joker_markup = None
    if joker:
        uploaded = request.files.get("joker_svg")
        if not uploaded or not uploaded.filename:
            flash("Upload an SVG joker image or untick the joker option.")
            return redirect("/")
        try:
            joker_markup = uploaded.read().decode("utf-8")
        except UnicodeDecodeError:
            flash("Unable to read the joker image as UTF-8 SVG text.")
            return redirect("/")

    try:
        cards = generate_cards(
            pool=pool,
            size=size,
            count=count,
            ordered=bool(request.form.get("ordered")),
            joker=joker,
            seed=seed,
        )
    except (ValueError, RuntimeError) as e:
        flash(str(e))
        return redirect("/")

    layout = layout_from_env()
    try:
        pdf_bytes = render_cards_pdf(cards, layout=layout, joker_markup=joker_markup)
    except RenderError as e:
        app.logger.warning("Render failed: %s", e)
        flash(str(e))
        return redirect("/")

    return Response(
        pdf_bytes,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{layout.output_filename}"'},
    )


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000, debug=True)
