"""HTML template for session reports.

Rendered through a Jinja2 environment with autoescaping on, so every
interpolated value is escaped.
"""

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>API Test Session Report: {{ report.session_id }}</title>
<style>
  body { font-family: -apple-system, "Segoe UI", Arial, sans-serif; margin: 2em; color: #222; background: #fafbfc; }
  h1 { color: #2c3e50; margin-bottom: 0.2em; }
  h2 { color: #34495e; border-bottom: 1px solid #ddd; padding-bottom: 0.2em; }
  .meta { display: grid; grid-template-columns: max-content 1fr; gap: 0.3em 1em; }
  .cards { display: flex; flex-wrap: wrap; gap: 1em; margin: 1em 0; }
  .card { background: #fff; border: 1px solid #e1e4e8; border-radius: 6px; padding: 0.8em 1.2em; min-width: 9em; }
  .card .value { font-size: 1.5em; font-weight: bold; }
  .card .label { color: #666; font-size: 0.85em; }
  .pass { color: #1a7f37; }
  .fail { color: #cf222e; }
  .badge { display: inline-block; padding: 0.1em 0.6em; border-radius: 1em; font-size: 0.8em; font-weight: bold; color: #fff; }
  .badge.pass { background: #1a7f37; color: #fff; }
  .badge.fail { background: #cf222e; color: #fff; }
  .method { font-family: monospace; font-weight: bold; }
  table { border-collapse: collapse; width: 100%; margin-top: 0.5em; background: #fff; }
  th, td { border: 1px solid #d0d7de; padding: 0.4em 0.6em; text-align: left; vertical-align: top; }
  th { background: #f6f8fa; }
  details.entry { background: #fff; border: 1px solid #d0d7de; border-radius: 6px; margin: 0.6em 0; padding: 0.4em 0.8em; }
  details.entry > summary { cursor: pointer; display: flex; gap: 0.8em; align-items: center; }
  .url { font-family: monospace; word-break: break-all; }
  .columns { display: grid; grid-template-columns: 1fr 1fr; gap: 1em; }
  pre { background: #f6f8fa; padding: 0.6em; border-radius: 4px; overflow-x: auto; white-space: pre-wrap; word-break: break-word; margin: 0; }
  .muted { color: #666; }
  .toolbar button { margin-right: 0.5em; }
</style>
</head>
<body>
<h1>API Test Session Report</h1>
<div class="meta">
  <b>Session ID:</b><span>{{ report.session_id }}</span>
  <b>Status:</b><span>{{ report.status }}</span>
  <b>Start Time:</b><span>{{ report.start_time }}</span>
  {% if report.end_time %}<b>End Time:</b><span>{{ report.end_time }}</span>{% endif %}
  {% if report.execution_time_ms is not none %}<b>Execution Time:</b><span>{{ report.execution_time_ms }} ms</span>{% endif %}
  <b>Log Entries:</b><span>{{ report.log_count }}</span>
  <b>Generated:</b><span>{{ report.generated_at }}</span>
</div>

<h2>Summary</h2>
<div class="cards">
  <div class="card"><div class="value">{{ report.summary.total_requests }}</div><div class="label">Total requests</div></div>
  <div class="card"><div class="value pass">{{ report.summary.successful_requests }}</div><div class="label">Passed</div></div>
  <div class="card"><div class="value fail">{{ report.summary.failed_requests }}</div><div class="label">Failed</div></div>
  <div class="card"><div class="value">{{ report.summary.success_rate }}</div><div class="label">Success rate</div></div>
  <div class="card"><div class="value">{{ report.summary.validations_passed }}/{{ report.summary.validations_passed + report.summary.validations_failed }}</div><div class="label">Validations passed</div></div>
  <div class="card"><div class="value">{{ report.summary.validation_rate }}</div><div class="label">Validation rate</div></div>
  <div class="card"><div class="value">{{ report.summary.single_requests }}</div><div class="label">Single requests</div></div>
  <div class="card"><div class="value">{{ report.summary.chain_requests }}</div><div class="label">Chain steps ({{ report.summary.chain_count }} chains)</div></div>
</div>

{% if report.timing %}
<h2>Timing</h2>
<p>Session duration: <b>{{ report.timing.session_duration_ms }} ms</b> &middot; Average interval: <b>{{ report.timing.average_interval_ms }} ms</b></p>
<table>
  <tr><th>#</th><th>Request</th><th>Timestamp</th><th>Offset (ms)</th><th>Interval (ms)</th></tr>
  {% for item in report.timing.items %}
  <tr>
    <td>{{ item.number }}</td>
    <td><span class="method">{{ item.method }}</span> <span class="url">{{ item.url }}</span></td>
    <td>{{ item.timestamp }}</td>
    <td>{{ item.offset_ms }}</td>
    <td>{{ item.interval_ms }}</td>
  </tr>
  {% endfor %}
</table>
{% endif %}

<h2>Requests &amp; Results</h2>
<div class="toolbar">
  <button type="button" onclick="toggleAll(true)">Expand all</button>
  <button type="button" onclick="toggleAll(false)">Collapse all</button>
</div>
{% for entry in report.entries %}
<details class="entry">
  <summary>
    <span>{{ entry.number }}</span>
    <span class="muted">{{ entry.kind }}{% if entry.name %}: {{ entry.name }}{% endif %}</span>
    <span class="method">{{ entry.method }}</span>
    <span class="url">{{ entry.url }}</span>
    <span>{{ entry.status }} {{ entry.status_text }}</span>
    <span class="badge {{ 'pass' if entry.passed else 'fail' }}">{{ 'PASS' if entry.passed else 'FAIL' }}</span>
  </summary>
  <p class="muted">{{ entry.timestamp }} &middot; {{ entry.reason }}</p>
  <div class="columns">
    <div>
      <h3>Request</h3>
      <h4>Headers</h4>
      <pre>{{ entry.request_headers }}</pre>
      <h4>Body</h4>
      <pre>{{ entry.request_body }}</pre>
    </div>
    <div>
      <h3>Response</h3>
      <h4>Content-Type</h4>
      <pre>{{ entry.content_type }}</pre>
      <h4>Body</h4>
      <pre>{{ entry.response_body }}</pre>
    </div>
  </div>
  {% if entry.extracted %}
  <h3>Extracted</h3>
  <pre>{{ entry.extracted }}</pre>
  {% endif %}
  <h3>Validation</h3>
  <table>
    <tr><th>Check</th><th>Expected</th><th>Actual</th><th>Result</th></tr>
    {% for comparison in entry.comparisons %}
    <tr>
      <td>{{ comparison.dimension }}</td>
      <td><pre>{{ comparison.expected }}</pre></td>
      <td><pre>{{ comparison.actual }}</pre></td>
      <td class="{{ 'pass' if comparison.passed else 'fail' }}">{{ 'PASS' if comparison.passed else 'FAIL' }}</td>
    </tr>
    {% endfor %}
  </table>
</details>
{% else %}
<p class="muted">No requests recorded.</p>
{% endfor %}
<script>
  function toggleAll(open) {
    document.querySelectorAll('details.entry').forEach(function (el) { el.open = open; });
  }
</script>
</body>
</html>
"""
