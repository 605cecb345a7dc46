"""Shell wrapper and completion snippets emitted by `git wt --init <shell>`.

Each wrapper replaces `git` with a function that runs `git wt` with
GIT_WT_SHELL_INTEGRATION=1, prints every output line but the last, and
changes directory to the last line when the command succeeded and that line
names an existing directory. With `--nocd` on the command line the path is
printed instead.

Completion goes through click's completion protocol (_GIT_WT_COMPLETE).
"""

BASH_WRAPPER = r"""
# Override git command to cd after 'git wt <branch>'
git() {
    if [[ "$1" == "wt" ]]; then
        shift
        local no_switch=false
        local arg
        for arg in "$@"; do
            if [[ "$arg" == "--nocd" ]]; then
                no_switch=true
            fi
        done
        local result exit_code last_line
        result=$(GIT_WT_SHELL_INTEGRATION=1 command git wt "$@")
        exit_code=$?
        last_line=$(printf '%s\n' "$result" | tail -n 1)
        if [[ $exit_code -eq 0 && -n "$last_line" && -d "$last_line" ]]; then
            printf '%s\n' "$result" | sed '$d'
            if [[ "$no_switch" == "true" ]]; then
                printf '%s\n' "$last_line"
            else
                cd "$last_line" || return
            fi
        else
            [[ -n "$result" ]] && printf '%s\n' "$result"
            return $exit_code
        fi
    else
        command git "$@"
    fi
}
"""

BASH_COMPLETION = r"""
# git wt completion for bash (git's completion dispatches to _git_<subcommand>)
_git_wt() {
    local IFS=$'\n'
    local response line
    response=$(env COMP_WORDS="git-wt ${COMP_WORDS[*]:2}" COMP_CWORD=$((COMP_CWORD - 1)) \
        _GIT_WT_COMPLETE=bash_complete git-wt 2>/dev/null)
    COMPREPLY=()
    for line in $response; do
        COMPREPLY+=("${line#*,}")
    done
}
"""

ZSH_WRAPPER = BASH_WRAPPER

ZSH_COMPLETION = r"""
# git wt completion for zsh with descriptions
_git-wt() {
    local -a completions response
    response=("${(@f)$(env COMP_WORDS="git-wt ${words[2,-1]}" COMP_CWORD=$((CURRENT - 1)) \
        _GIT_WT_COMPLETE=zsh_complete git-wt 2>/dev/null)}")
    local type key descr
    for type key descr in "${response[@]}"; do
        [[ -z "$key" ]] && continue
        if [[ "$descr" == "_" ]]; then
            completions+=("${key}")
        else
            completions+=("${key}:${descr}")
        fi
    done
    _describe 'git-wt' completions
}

# Hook into git completion for 'git wt'
_git-wt-wrapper() {
    if (( CURRENT > 2 )) && [[ "${words[2]}" == "wt" ]]; then
        shift words
        (( CURRENT-- ))
        _git-wt
    else
        _git
    fi
}

if (( $+functions[compdef] )); then
    compdef _git-wt git-wt
    compdef _git-wt-wrapper git
fi
"""

FISH_WRAPPER = r"""
# Override git command to cd after 'git wt <branch>'
function git --wraps git
    if test "$argv[1]" = "wt"
        set -l no_switch false
        if contains -- --nocd $argv[2..]
            set no_switch true
        end
        set -lx GIT_WT_SHELL_INTEGRATION 1
        set -l result (command git wt $argv[2..])
        set -l exit_code $status
        set -l last_line ""
        if test (count $result) -gt 0
            set last_line $result[-1]
        end
        if test $exit_code -eq 0 -a -n "$last_line" -a -d "$last_line"
            if test (count $result) -gt 1
                printf "%s\n" $result[1..-2]
            end
            if test "$no_switch" = "true"
                printf "%s\n" "$last_line"
            else
                cd "$last_line"
            end
        else
            if test (count $result) -gt 0
                printf "%s\n" $result
            end
            return $exit_code
        end
    else
        command git $argv
    end
end
"""

FISH_COMPLETION = r"""
# git wt completion for fish
function __fish_git_wt_completions
    set -l tokens (commandline -opc)
    set -l current (commandline -ct)
    env COMP_WORDS="git-wt $tokens[3..] $current" COMP_CWORD="$current" \
        _GIT_WT_COMPLETE=fish_complete git-wt 2>/dev/null | string replace -r '^[^,]*,' ''
end

function __fish_git_wt_needs_completion
    set -l cmd (commandline -opc)
    test (count $cmd) -ge 2 -a "$cmd[2]" = "wt"
end

complete -c git -n '__fish_git_wt_needs_completion' -f -a '(__fish_git_wt_completions)'
"""

POWERSHELL_WRAPPER = r"""
# Override git command to cd after 'git wt <branch>'
function Invoke-Git {
    if ($args.Count -gt 0 -and $args[0] -eq "wt") {
        $wtArgs = @($args | Select-Object -Skip 1)
        $noSwitch = $wtArgs -contains "--nocd"
        $env:GIT_WT_SHELL_INTEGRATION = "1"
        try {
            $result = @(& git.exe wt @wtArgs)
            $exitCode = $LASTEXITCODE
        } finally {
            Remove-Item Env:GIT_WT_SHELL_INTEGRATION -ErrorAction SilentlyContinue
        }
        $lines = @($result | Where-Object { $_ -ne "" })
        $lastLine = if ($lines.Count -gt 0) { $lines[-1] } else { "" }
        if ($exitCode -eq 0 -and $lastLine -and (Test-Path $lastLine -PathType Container)) {
            if ($lines.Count -gt 1) {
                $lines[0..($lines.Count - 2)] | ForEach-Object { Write-Output $_ }
            }
            if ($noSwitch) {
                Write-Output $lastLine
            } else {
                Set-Location $lastLine
            }
        } else {
            $result | ForEach-Object { Write-Output $_ }
            $global:LASTEXITCODE = $exitCode
        }
    } else {
        & git.exe @args
    }
}
Set-Alias -Name git -Value Invoke-Git -Option AllScope
"""

POWERSHELL_COMPLETION = r"""
# git wt completion for PowerShell
$scriptBlock = {
    param($wordToComplete, $commandAst, $cursorPosition)
    $tokens = $commandAst.ToString() -split '\s+'
    if ($tokens.Count -ge 2 -and $tokens[1] -eq "wt") {
        $rest = if ($tokens.Count -gt 2) { $tokens[2..($tokens.Count - 1)] -join ' ' } else { '' }
        $env:COMP_WORDS = "git-wt $rest"
        $env:COMP_CWORD = $wordToComplete
        $env:_GIT_WT_COMPLETE = "fish_complete"
        try {
            $completions = @(& git-wt.exe 2>$null)
        } finally {
            Remove-Item Env:COMP_WORDS, Env:COMP_CWORD, Env:_GIT_WT_COMPLETE -ErrorAction SilentlyContinue
        }
        $completions | ForEach-Object {
            $parts = ($_ -replace '^[^,]*,', '') -split [char]9, 2
            $completion = $parts[0]
            $tooltip = if ($parts.Count -gt 1) { $parts[1] } else { $parts[0] }
            [System.Management.Automation.CompletionResult]::new($completion, $completion, 'ParameterValue', $tooltip)
        }
    }
}
Register-ArgumentCompleter -Native -CommandName git -ScriptBlock $scriptBlock
"""

SHELL_SCRIPTS: dict[str, tuple[str, str, str]] = {
    "bash": ("bash", BASH_WRAPPER, BASH_COMPLETION),
    "zsh": ("zsh", ZSH_WRAPPER, ZSH_COMPLETION),
    "fish": ("fish", FISH_WRAPPER, FISH_COMPLETION),
    "powershell": ("PowerShell", POWERSHELL_WRAPPER, POWERSHELL_COMPLETION),
}
