"""Live-reload client assets and reserved URL paths.

Paths under ``/__parvus/`` are answered by the server itself, before
any middleware runs.
"""

RESERVED_PREFIX = "/__parvus/"
CLIENT_PATH = "/__parvus/reload.js"
EVENTS_PATH = "/__parvus/events"

REFRESH_EVENT = "refresh"

RELOAD_CLIENT_JS = """\
(function () {
  "use strict";
  // EventSource reconnects on its own after network errors; a server
  // restart therefore re-attaches without user action.
  function connect(url) {
    var source = new EventSource(url);
    source.addEventListener("open", function () {
      console.debug("[parvus] live reload connected");
    });
    return source;
  }
  window.parvus = { connect: connect };
})();
"""
