import re


NON_SPACE = re.compile(r"\S")


def get_line_to(src, index, start_line=1):
    """Line number of ``src[index]`` when ``src`` starts on ``start_line``."""
    return start_line + src.count("\n", 0, index)


def find_non_space(src, index):
    """Offset of the first non-space character at or after ``index``."""
    match = NON_SPACE.search(src, index)
    if match:
        return match.start()
    return index


def line_offsets(src):
    """Offsets of the first character of every line of ``src``."""
    offsets = [0]
    for match in re.finditer("\n", src):
        offsets.append(match.end())
    return offsets


def source_line(src, line, start_line=1):
    """The stripped text of ``line`` in ``src``, for warnings."""
    lines = src.split("\n")
    index = line - start_line
    if 0 <= index < len(lines):
        return lines[index].strip()
    return ""


def node_text(node):
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def node_line(node, start_line=1):
    return start_line + node.start_point[0]
