"""Chart rendering helpers.

The server builds Chart.js payloads; drawing happens in the browser.
"""
