"""CSS styles for the contract naming application."""

CSS = """
Screen {
    background: #1e1e2e;
}

Header {
    background: #181825;
    text-style: bold;
    padding: 0 1;
    height: 3;
}

Footer {
    background: #181825;
    height: 2;
}

Button {
    background: transparent;
    color: #3b82f6;
    border: none;
    height: 3;
    min-height: 3;
    min-width: 14;
    padding: 0 1;
    margin: 0;
    content-align: center middle;
}

Button:hover {
    background: #3b82f6;
    color: #ffffff;
    text-style: underline;
}

Button:focus {
    background: #3b82f6;
    color: #ffffff;
    text-style: bold underline reverse;
}

Button.primary {
    background: #22d3ee;
    color: #0f172a;
    border: solid #22d3ee;
    text-style: bold;
}

Horizontal {
    height: auto;
    margin: 1 0 0 0;
}

Label {
    color: #e2e8f0;
}

Static {
    color: #a6adc8;
}

ModalScreen {
    align: center middle;
}

#plan-status {
    padding: 1 2;
    color: #a6adc8;
}

#steps-title {
    text-style: bold;
    color: #67e8f9;
    margin-bottom: 1;
    border-bottom: solid #22d3ee;
}

#steps-subtitle, #batched-note {
    color: #a6adc8;
    margin-bottom: 1;
}

#steps-list {
    height: auto;
    max-height: 24;
    background: #181825;
    border: solid #3b82f6;
    padding: 0 1;
}

#status-label {
    color: #fbbf24;
    margin-top: 1;
}
"""
