# scripts/validate_jsonrpc.py
"""
Validate JSON-RPC messages for the formatting mistakes that make the server
answer with a parse error (-32700).

Usage:
    echo '<message>' | python scripts/validate_jsonrpc.py
    python scripts/validate_jsonrpc.py < requests.jsonl
"""
import json
import sys

QUERY_TOOLS = ('search_scriptures', 'get_scripture', 'get_chapter')


def validate_message(line):
    """Return None for a valid (or blank) line, else a description of the problem."""
    line = line.strip()
    if not line:
        return None

    try:
        message = json.loads(line)
    except json.JSONDecodeError as e:
        if '""' in line:
            return ("Invalid JSON syntax - likely caused by extra quotes in query string.\n"
                    f"Found '\"\"' which should be '\"'\nError: {e}\nLine: {line}")
        return f"Invalid JSON syntax: {e}\nLine: {line}"

    if not isinstance(message, dict):
        return "JSON-RPC message must be an object"
    if message.get('jsonrpc') != '2.0':
        return f"Invalid JSON-RPC version: expected '2.0', got '{message.get('jsonrpc', '')}'"
    if not message.get('method'):
        return "Missing 'method' field in JSON-RPC message"

    if message['method'] == 'tools/call':
        params = message.get('params')
        if not isinstance(params, dict):
            return "Failed to parse tools/call params"
        name = params.get('name')
        if not name:
            return "Missing tool 'name' in tools/call params"
        arguments = params.get('arguments')
        if not isinstance(arguments, dict):
            return "Missing 'arguments' in tools/call params"

        if name in QUERY_TOOLS:
            if 'query' not in arguments and 'reference' not in arguments:
                return f"Missing required 'query' argument for {name}"
            query = arguments.get('query', arguments.get('reference'))
            if isinstance(query, str) and (query.startswith('"') or query.endswith('"')):
                return (f"Query argument contains extra quotes: {query!r}\n"
                        "Remove the extra quotes around the query string")

    return None


def main(stream=sys.stdin):
    has_errors = False
    print("Validating JSON-RPC messages...")
    print("=====================================")

    for line_num, line in enumerate(stream, start=1):
        problem = validate_message(line)
        if problem:
            print(f"Line {line_num}: {problem}")
            has_errors = True
        elif line.strip():
            print(f"Line {line_num}: Valid JSON-RPC message")

    print("=====================================")
    if has_errors:
        print("Validation completed with errors")
        print("\nCommon JSON formatting issues:")
        print("- Extra quotes: \"\"text\" should be \"text\"")
        print("- Missing commas between fields")
        print("- Unescaped quotes inside strings")
        print("- Missing closing braces or brackets")
        return 1
    print("All JSON-RPC messages are valid")
    return 0


if __name__ == '__main__':
    if len(sys.argv) > 1 and sys.argv[1] in ('-h', '--help'):
        print(__doc__)
        sys.exit(0)
    sys.exit(main())
