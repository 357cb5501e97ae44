# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""
Todo list example.

Drives a FlatState the way a UI adapter would: event handlers call the
write operations, and the subscriber re-renders from get().
"""

from flatstate import FlatState, MutationEvent


class TodoApp:
    """A todo list whose view re-renders after every write."""

    def __init__(self):
        self.state = FlatState({'title': 'Today', 'todos': [], 'filter': 'all'})
        self.state.set_subscriber(self.on_change)
        self.renders = []

    def on_change(self, event: MutationEvent):
        self.renders.append(self.render())

    # handlers

    def add(self, text):
        self.state.append(['todos'], {'text': text, 'done': False}, {'source': 'input'})

    def toggle(self, index):
        self.state.toggle(['todos', index, 'done'])

    def remove(self, index):
        self.state.destroy(['todos'], index)

    def edit(self, index, text):
        # handlers scoped to one item work on a substate
        item = self.state.sub_state(['todos', index])
        item.set(['text'], text)

    # view

    def render(self):
        lines = [f"# {self.state.get(['title'])}"]
        for i in range(self.state.size(['todos'])):
            todo = self.state.get(['todos', i])
            mark = 'x' if todo['done'] else ' '
            lines.append(f"[{mark}] {todo['text']}")
        return '\n'.join(lines)


if __name__ == '__main__':
    app = TodoApp()
    app.add('buy milk')
    app.add('write report')
    app.toggle(0)
    app.edit(-1, 'write the report')
    app.remove(0)
    print(app.renders[-1])
